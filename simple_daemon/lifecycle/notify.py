"""
Readiness Notifications - systemd sd_notify integration.

Tells a supervising systemd unit (Type=notify or Type=notify-reload) when
the daemon is ready, reloading, or shutting down. Outside systemd there is
no NOTIFY_SOCKET and every call is a no-op.
"""

import os
import time

import sdnotify
import structlog

__all__ = ["NullNotifier", "SystemdNotifier", "notification_socket"]

logger = structlog.get_logger(__name__)


class SystemdNotifier:
    """ReadinessNotifier speaking the sd_notify datagram protocol.

    sdnotify swallows socket errors unless debug is set, so none of these
    methods raise.
    """

    def __init__(self, notifier: sdnotify.SystemdNotifier | None = None) -> None:
        self._notifier = notifier or sdnotify.SystemdNotifier()

    def _send(self, *fields: str) -> None:
        state = "\n".join(fields)
        self._notifier.notify(state)
        logger.debug("sd_notify_sent", state=state)

    def ready(self) -> None:
        self._send("READY=1")

    def reloading(self, message: str) -> None:
        # notify-reload units require MONOTONIC_USEC alongside RELOADING=1
        usec = time.clock_gettime_ns(time.CLOCK_MONOTONIC) // 1000
        self._send("RELOADING=1", f"STATUS={message}", f"MONOTONIC_USEC={usec}")

    def status(self, message: str) -> None:
        self._send(f"STATUS={message}")


class NullNotifier:
    """ReadinessNotifier used when there is no supervisor to talk to."""

    def ready(self) -> None:
        pass

    def reloading(self, message: str) -> None:
        pass

    def status(self, message: str) -> None:
        pass


def notification_socket(enabled: bool = True) -> SystemdNotifier | None:
    """Return a systemd notifier if NOTIFY_SOCKET is set, else None."""
    if not enabled or not os.environ.get("NOTIFY_SOCKET"):
        return None
    return SystemdNotifier()
