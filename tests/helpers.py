"""Test doubles shared across the test suite."""

import asyncio
from collections.abc import Callable


class ProcessReplaced(Exception):
    """Raised by FakeExec in place of actually replacing the process."""


class FakeExec:
    """Stands in for os.execve and records what would have been executed."""

    def __init__(self, error: OSError | None = None) -> None:
        self.calls: list[tuple[str, list[str], dict[str, str]]] = []
        self.error = error

    def __call__(self, binary: str, args: list[str], env: dict[str, str]) -> None:
        self.calls.append((binary, args, env))
        if self.error is not None:
            raise self.error
        raise ProcessReplaced(binary)


class RecordingComponent:
    """DaemonComponent that records start/stop activity into a shared list."""

    def __init__(
        self,
        name: str,
        events: list[tuple[str, str]],
        start_delay: float = 0.0,
        stop_delay: float = 0.0,
        fail_start: bool = False,
        fail_stop: bool = False,
        stop_gate: asyncio.Event | None = None,
    ) -> None:
        self.name = name
        self.events = events
        self.start_delay = start_delay
        self.stop_delay = stop_delay
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.stop_gate = stop_gate
        self.start_count = 0
        self.stop_count = 0

    async def start(self) -> None:
        self.start_count += 1
        self.events.append(("start_begin", self.name))
        await asyncio.sleep(self.start_delay)
        if self.fail_start:
            raise RuntimeError(f"{self.name} failed to start")
        self.events.append(("start_end", self.name))

    async def stop(self) -> None:
        self.stop_count += 1
        self.events.append(("stop_begin", self.name))
        if self.stop_gate is not None:
            await self.stop_gate.wait()
        await asyncio.sleep(self.stop_delay)
        if self.fail_stop:
            raise RuntimeError(f"{self.name} failed to stop")
        self.events.append(("stop_end", self.name))


class RecordingNotifier:
    """ReadinessNotifier that remembers every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str | None]] = []

    def ready(self) -> None:
        self.calls.append(("ready", None))

    def reloading(self, message: str) -> None:
        self.calls.append(("reloading", message))

    def status(self, message: str) -> None:
        self.calls.append(("status", message))


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll until predicate() is true or fail after timeout seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)
