"""Process execution helpers shared by packagers."""

from __future__ import annotations

__all__ = [
    "ProcessOutput",
    "resolve_executable_name",
    "run_in_series",
    "spawn_process",
]

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from node_packagers.errors import SpawnError, SpawnTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ProcessOutput:
    """Captured output of a finished process."""

    stdout: str
    stderr: str


def resolve_executable_name(name: str, platform: str | None = None) -> str:
    """Return the executable name for the given platform.

    Windows-family platforms ship node tools as ``.cmd`` shims.
    """
    if platform is None:
        platform = sys.platform
    if platform.startswith("win"):
        return f"{name}.cmd"
    return name


async def spawn_process(
    command: str,
    args: list[str],
    cwd: str | None = None,
    timeout: float | None = None,
) -> ProcessOutput:
    """Run a command to completion and capture its output.

    Args:
        command: Executable to run.
        args: Arguments passed to the executable.
        cwd: Working directory for the process.
        timeout: Seconds to wait before killing the process. None waits forever.

    Returns:
        ProcessOutput with decoded stdout and stderr.

    Raises:
        SpawnError: If the command cannot be started or exits non-zero.
        SpawnTimeoutError: If the command exceeds the timeout.
    """
    cmd = [command, *args]
    logger.debug("Spawning %s (cwd=%s)", " ".join(cmd), cwd)

    # create_subprocess_exec passes arguments without a shell
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        raise SpawnError(f"Failed to start {command}: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError:
        process.kill()
        await process.wait()
        raise SpawnTimeoutError(command, timeout) from None

    out = stdout.decode() if stdout else ""
    err = stderr.decode() if stderr else ""

    if process.returncode != 0:
        raise SpawnError(
            f"{' '.join(cmd)} exited with code {process.returncode}",
            stdout=out,
            stderr=err,
            returncode=process.returncode,
        )

    return ProcessOutput(stdout=out, stderr=err)


async def run_in_series(factories: Iterable[Callable[[], Awaitable[T]]]) -> list[T]:
    """Await each factory's coroutine in order, one at a time.

    A factory is only called after the previous coroutine finished, so the
    first failure stops the series and later factories never start.
    """
    results: list[T] = []
    for factory in factories:
        results.append(await factory())
    return results
