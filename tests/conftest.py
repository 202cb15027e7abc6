"""Test fixtures for node-packagers."""

from unittest.mock import AsyncMock

import pytest

from node_packagers import PnpmPackager, ProcessOutput


@pytest.fixture
def spawn() -> AsyncMock:
    """Process collaborator that succeeds with empty output."""
    return AsyncMock(return_value=ProcessOutput(stdout="", stderr=""))


@pytest.fixture
def pnpm(spawn: AsyncMock) -> PnpmPackager:
    """pnpm packager wired to the mocked spawn, on a POSIX platform."""
    return PnpmPackager(spawn=spawn, platform="linux")
