"""
simple-daemon - Run pluggable components as a long-lived service.

Starts components in order, stops them concurrently within a time bound,
and turns SIGHUP into a full in-place process restart.
"""

__version__ = "1.0.0"

from .config import DaemonConfig, config
from .contracts import DaemonComponent, LoggerAware, LoggerAwareMixin, ReadinessNotifier
from .daemon import DaemonPhase, SimpleDaemon
from .errors import (
    ComponentStartFailure,
    CwdUnavailable,
    DaemonError,
    RestartFailure,
    ShutdownTimeout,
)
from .logging import configure_logging, null_logger
from .process import Process, process

__all__ = [
    "__version__",
    "ComponentStartFailure",
    "CwdUnavailable",
    "DaemonComponent",
    "DaemonConfig",
    "DaemonError",
    "DaemonPhase",
    "LoggerAware",
    "LoggerAwareMixin",
    "Process",
    "ReadinessNotifier",
    "RestartFailure",
    "ShutdownTimeout",
    "SimpleDaemon",
    "config",
    "configure_logging",
    "null_logger",
    "process",
]
