"""Error types for node-packagers.

All errors inherit from PackagerError for easy catching at the caller.
"""


class PackagerError(Exception):
    """Base class for all node-packagers errors."""

    pass


class SpawnError(PackagerError):
    """Raised when a spawned command exits with a non-zero code.

    Carries the captured output so callers can inspect what the tool said.
    """

    def __init__(
        self,
        message: str,
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = None,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(message)


class SpawnTimeoutError(SpawnError):
    """Raised when a spawned command exceeds its timeout."""

    def __init__(self, command: str, timeout_seconds: float) -> None:
        self.command = command
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Command '{command}' timed out after {timeout_seconds}s")


class PackagerNotFoundError(PackagerError):
    """Raised when a packager name is not registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        msg = f"Packager '{name}' not found"
        if self.available:
            msg += f". Available: {', '.join(self.available)}"
        super().__init__(msg)


class ConfigurationError(PackagerError):
    """Error in configuration (invalid options, unreadable config file)."""

    pass
