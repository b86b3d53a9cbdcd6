"""
Component Protocol - Contract for daemon components.

A component is anything with async start() and stop(). The daemon starts
components in the order they were attached and stops them all concurrently.

Components that want the daemon's logger also implement set_logger().
"""

from typing import Any, Protocol, runtime_checkable

from ..logging import null_logger

__all__ = ["DaemonComponent", "LoggerAware", "LoggerAwareMixin"]


@runtime_checkable
class DaemonComponent(Protocol):
    """Lifecycle contract for daemon components.

    Example:
        class Worker:
            async def start(self) -> None:
                self._task = asyncio.create_task(self._loop())

            async def stop(self) -> None:
                self._task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._task
    """

    async def start(self) -> None:
        """Make the component ready to do its work.

        Raising aborts the daemon's start sequence.
        """
        ...

    async def stop(self) -> None:
        """Release all resources.

        Errors are logged by the daemon and do not stop other components.
        """
        ...


@runtime_checkable
class LoggerAware(Protocol):
    """Optional capability: accepts the daemon's logger on attachment."""

    def set_logger(self, logger: Any) -> None:
        ...


class LoggerAwareMixin:
    """Default LoggerAware implementation.

    Logs go nowhere until a logger is injected.
    """

    logger: Any = null_logger()

    def set_logger(self, logger: Any) -> None:
        self.logger = logger
