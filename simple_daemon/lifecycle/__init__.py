"""
Lifecycle - Process-level plumbing for the daemon.

Handles:
- One-shot OS signal subscriptions (SIGHUP/SIGINT/SIGTERM)
- systemd readiness notifications (ready, reloading, status)
"""

from .notify import NullNotifier, SystemdNotifier, notification_socket
from .signals import SignalSubscription, SignalSubscriptions

__all__ = [
    "NullNotifier",
    "SignalSubscription",
    "SignalSubscriptions",
    "SystemdNotifier",
    "notification_socket",
]
