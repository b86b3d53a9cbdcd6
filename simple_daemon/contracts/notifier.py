"""
Readiness Notifier Protocol - Contract for supervisor notifications.

Fire-and-forget status updates for whatever supervises the daemon (usually
systemd). Implementations must never raise.
"""

from typing import Protocol, runtime_checkable

__all__ = ["ReadinessNotifier"]


@runtime_checkable
class ReadinessNotifier(Protocol):
    """Lifecycle notifications sent to an external supervisor."""

    def ready(self) -> None:
        """Startup finished."""
        ...

    def reloading(self, message: str) -> None:
        """A reload has begun."""
        ...

    def status(self, message: str) -> None:
        """Free-form status line."""
        ...
