"""
Contracts (Protocols) for simple-daemon.

These protocols define the interfaces that implementations must satisfy.
Using Protocol enables structural subtyping - no inheritance required.
"""

from .component import DaemonComponent, LoggerAware, LoggerAwareMixin
from .notifier import ReadinessNotifier

__all__ = [
    "DaemonComponent",
    "LoggerAware",
    "LoggerAwareMixin",
    "ReadinessNotifier",
]
