"""
Centralized configuration for simple-daemon.

Configuration sources (priority order):
1. Environment variables (SIMPLE_DAEMON_*)
2. Default values

Environment variables:
- SIMPLE_DAEMON_LOG_LEVEL: Log level (default: INFO)
- SIMPLE_DAEMON_LOG_FORMAT: "console" or "json" (default: console)
- SIMPLE_DAEMON_TITLE: Process title to set on startup (default: unset)
- SIMPLE_DAEMON_SHUTDOWN_TIMEOUT: Bound on stopping all components, seconds (default: 5)
- SIMPLE_DAEMON_RELOAD_DELAY: Delay between SIGHUP and reload, seconds (default: 0.05)
- SIMPLE_DAEMON_RESTART_DELAY: Delay between shutdown and re-exec, seconds (default: 0.05)
- SIMPLE_DAEMON_SHUTDOWN_DELAY: Delay between shutdown and loop stop, seconds (default: 0.1)
- SIMPLE_DAEMON_BINARY_HINT_VAR: Env variable holding the invocation path (default: _)
- SIMPLE_DAEMON_NOTIFY: Enable systemd readiness notifications (default: true)
"""

import os
from dataclasses import dataclass

__all__ = ["DaemonConfig", "config"]


def _get_env(key: str, default: str) -> str:
    """Get environment variable with SIMPLE_DAEMON_ prefix."""
    return os.environ.get(f"SIMPLE_DAEMON_{key}", default)


def _get_env_float(key: str, default: float) -> float:
    """Get float environment variable."""
    return float(_get_env(key, str(default)))


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(f"SIMPLE_DAEMON_{key}")
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes", "on")


def _get_env_optional(key: str) -> str | None:
    """Get environment variable, treating empty as unset."""
    val = os.environ.get(f"SIMPLE_DAEMON_{key}")
    return val or None


@dataclass(frozen=True)
class DaemonConfig:
    """Immutable daemon configuration."""

    log_level: str = _get_env("LOG_LEVEL", "INFO")
    log_format: str = _get_env("LOG_FORMAT", "console")
    process_title: str | None = _get_env_optional("TITLE")

    # Shutdown / reload timing
    shutdown_timeout: float = _get_env_float("SHUTDOWN_TIMEOUT", 5.0)
    reload_delay: float = _get_env_float("RELOAD_DELAY", 0.05)
    restart_delay: float = _get_env_float("RESTART_DELAY", 0.05)
    shutdown_delay: float = _get_env_float("SHUTDOWN_DELAY", 0.1)

    # Self re-exec
    binary_hint_var: str = _get_env("BINARY_HINT_VAR", "_")

    # systemd readiness notifications
    notify_enabled: bool = _get_env_bool("NOTIFY", True)


# Global singleton
config = DaemonConfig()
