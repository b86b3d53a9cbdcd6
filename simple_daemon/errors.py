"""
Daemon errors.

Everything the orchestrator raises derives from DaemonError so hosts can
catch the whole family at the top of their entry point.
"""

from typing import Any

__all__ = [
    "ComponentStartFailure",
    "CwdUnavailable",
    "DaemonError",
    "RestartFailure",
    "ShutdownTimeout",
]


class DaemonError(Exception):
    """Base class for daemon lifecycle errors."""


class CwdUnavailable(DaemonError):
    """The working directory could not be determined."""

    def __init__(self, cause: OSError | None = None) -> None:
        self.cause = cause
        message = "Failed to determine current working directory"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ComponentStartFailure(DaemonError):
    """A component's start() raised; the start sequence was aborted."""

    def __init__(self, component: Any, cause: BaseException) -> None:
        self.component = component
        self.cause = cause
        super().__init__(f"Failed to start {type(component).__name__}: {cause}")


class ShutdownTimeout(DaemonError):
    """Stopping all components exceeded the shutdown bound.

    Never raised out of the orchestrator; it describes the logged error.
    """

    def __init__(self, timeout: float, pending: int) -> None:
        self.timeout = timeout
        self.pending = pending
        super().__init__(
            f"{pending} component(s) still stopping after {timeout:g}s"
        )


class RestartFailure(DaemonError):
    """Replacing the process image failed. Unrecoverable."""

    def __init__(self, binary: str, cause: OSError) -> None:
        self.binary = binary
        self.cause = cause
        super().__init__(f"Failed to re-execute {binary}: {cause}")
