"""
Simple Daemon - Runs components until a signal says otherwise.

Lifecycle:
    IDLE --run()--> STARTING --(all started)--> RUNNING
    RUNNING --SIGHUP--> RELOADING       (stop everything, re-exec this process)
    RUNNING --SIGINT/SIGTERM--> SHUTTING_DOWN --> STOPPED (run() returns)

Components start one by one in attachment order. On reload or shutdown
they are all stopped concurrently, bounded by shutdown_timeout; components
that are still stopping when the bound fires are no longer waited for.

Example:
    daemon = SimpleDaemon()
    await daemon.attach_task(Database())
    await daemon.attach_task(HttpServer())
    await daemon.run()
"""

import asyncio
import signal
from collections.abc import Coroutine
from enum import Enum
from typing import Any

import structlog

from .config import DaemonConfig, config as default_config
from .contracts import DaemonComponent, LoggerAware, ReadinessNotifier
from .errors import ShutdownTimeout
from .lifecycle import NullNotifier, SignalSubscriptions, notification_socket
from .process import Process, process as default_process
from .registry import ComponentId, ComponentRegistry

__all__ = ["DaemonPhase", "SimpleDaemon"]


class DaemonPhase(str, Enum):
    """Observable lifecycle phase, derived from the daemon's flags."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    RELOADING = "reloading"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class SimpleDaemon:
    """Orchestrates component startup, signals, reload and shutdown.

    The three flags (tasks_started, reloading, shutting_down) are only
    touched from coroutines on the daemon's own event loop, and every
    check-then-set happens before the first await.
    """

    def __init__(
        self,
        config: DaemonConfig | None = None,
        process: Process | None = None,
        notifier: ReadinessNotifier | None = None,
        logger: Any = None,
    ) -> None:
        self.config = config or default_config
        self.process = process or default_process
        self.notifier: ReadinessNotifier = (
            notifier
            or notification_socket(self.config.notify_enabled)
            or NullNotifier()
        )
        self.logger = logger or structlog.get_logger(__name__)
        self.registry = ComponentRegistry()

        self._tasks_started = False
        self._reloading = False
        self._shutting_down = False

        self._run_called = False
        self._stopped = asyncio.Event()
        self._signals = SignalSubscriptions()
        self._starter: asyncio.Task | None = None
        self._background: set[asyncio.Task] = set()
        self._fatal: BaseException | None = None

    # ─────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────

    @property
    def tasks_started(self) -> bool:
        return self._tasks_started

    @property
    def reloading(self) -> bool:
        return self._reloading

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def phase(self) -> DaemonPhase:
        if self._reloading:
            return DaemonPhase.RELOADING
        if self._shutting_down:
            if self._stopped.is_set():
                return DaemonPhase.STOPPED
            return DaemonPhase.SHUTTING_DOWN
        if self._tasks_started:
            return DaemonPhase.RUNNING
        if self._run_called:
            return DaemonPhase.STARTING
        return DaemonPhase.IDLE

    def set_logger(self, logger: Any) -> None:
        self.logger = logger

    # ─────────────────────────────────────────────────────────────────
    # Running
    # ─────────────────────────────────────────────────────────────────

    async def run(self) -> None:
        """Start all components and wait until shutdown.

        Raises:
            RuntimeError: If called more than once
            CwdUnavailable: If the working directory can't be captured
            ComponentStartFailure: If a component failed to start
            RestartFailure: If a reload could not re-execute the process
        """
        if self._run_called:
            raise RuntimeError("SimpleDaemon.run() may only be called once")
        self._run_called = True

        # Capture before any component gets a chance to chdir()
        self.process.initial_cwd()
        if self.config.process_title:
            self.process.set_title(self.config.process_title)

        self._register_signal_handlers()
        self._starter = self._spawn(self._start_tasks())
        try:
            await self._stopped.wait()
        finally:
            self._signals.cancel_all()
            if not self._starter.done():
                self._starter.cancel()

        if self._fatal is not None:
            raise self._fatal
        self.logger.info("daemon_stopped")

    def run_forever(self) -> None:
        """Blocking entry point: run the daemon on a fresh event loop."""
        asyncio.run(self.run())

    async def attach_task(self, component: DaemonComponent) -> ComponentId:
        """Attach a component.

        If the daemon is already running, the component is started before
        this returns.

        Raises:
            ComponentStartFailure: If a late-attached component fails to start
        """
        if isinstance(component, LoggerAware):
            component.set_logger(self.logger.bind(component=type(component).__name__))

        component_id = self.registry.attach(component)
        if self._tasks_started:
            await self.registry.start(component_id)
        return component_id

    async def _start_tasks(self) -> None:
        self.logger.info("components_starting", count=len(self.registry))
        await self.registry.start_all()
        if self._shutting_down:
            return
        self._tasks_started = True
        self.notifier.ready()
        self.logger.info("daemon_ready", components=len(self.registry))

    # ─────────────────────────────────────────────────────────────────
    # Signals
    # ─────────────────────────────────────────────────────────────────

    def _register_signal_handlers(self) -> None:
        try:
            self._signals.subscribe(signal.SIGHUP, self._on_reload_signal)
            self._signals.subscribe(signal.SIGINT, self._on_shutdown_signal)
            self._signals.subscribe(signal.SIGTERM, self._on_shutdown_signal)
        except (RuntimeError, NotImplementedError):
            # Signal handlers only work in the main thread
            self.logger.debug("signal_handlers_unavailable")

    def _on_reload_signal(self, signum: signal.Signals) -> None:
        self.logger.info("signal_received", signal=signum.name, action="reload")
        self._spawn(self._reload_later())

    def _on_shutdown_signal(self, signum: signal.Signals) -> None:
        self.logger.info("signal_received", signal=signum.name, action="shutdown")
        self._spawn(self.shutdown())

    async def _reload_later(self) -> None:
        # Let the signal delivery unwind before the heavy lifting
        await asyncio.sleep(self.config.reload_delay)
        await self.reload()

    # ─────────────────────────────────────────────────────────────────
    # Reload / shutdown
    # ─────────────────────────────────────────────────────────────────

    async def reload(self) -> None:
        """Stop all components, then replace this process with a fresh copy.

        Only returns if a reload is already in progress.

        Raises:
            RestartFailure: If the process image could not be replaced
        """
        if self._reloading:
            self.logger.error("reload_already_in_progress")
            return
        self._reloading = True

        self.logger.info("reload_stopping_components")
        self.notifier.reloading("Reloading the main process")
        await self.run_shutdown()

        self.logger.info("reload_restarting")
        # Give pending log and notification output a moment to flush
        await asyncio.sleep(self.config.restart_delay)
        self.process.restart()

    async def shutdown(self) -> None:
        """Stop all components, then end run()."""
        await self.run_shutdown()
        await asyncio.sleep(self.config.shutdown_delay)
        self._stopped.set()

    async def run_shutdown(self) -> None:
        """Stop every component concurrently, bounded by shutdown_timeout.

        Idempotent: a second call while a shutdown is running is ignored.
        A timeout is logged, never raised; slow components keep stopping in
        the background but are no longer waited for.
        """
        if self._shutting_down:
            self.logger.error("shutdown_already_in_progress")
            return
        self._shutting_down = True

        self.notifier.status("Shutting down")
        if self._starter is not None and not self._starter.done():
            self._starter.cancel()

        stopping = [self._keep(op) for op in self.registry.stop_operations()]
        self.logger.info("components_stopping", count=len(stopping))
        if stopping:
            timeout = self.config.shutdown_timeout
            _, pending = await asyncio.wait(stopping, timeout=timeout)
            if pending:
                error = ShutdownTimeout(timeout, len(pending))
                self.logger.error(
                    "shutdown_timed_out",
                    message="Shutdown timed out, stopping anyway",
                    error=str(error),
                    pending=len(pending),
                )

        self._tasks_started = False

    # ─────────────────────────────────────────────────────────────────
    # Background tasks
    # ─────────────────────────────────────────────────────────────────

    def _keep(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        """Run a coroutine as a task and hold a reference until it ends."""
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        """Like _keep(), but an exception from the task is fatal to run()."""
        task = self._keep(coro)
        task.add_done_callback(self._on_spawned_done)
        return task

    def _on_spawned_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        if self._fatal is None:
            self._fatal = exc
        self.logger.error("daemon_fatal_error", error=str(exc))
        self._stopped.set()
