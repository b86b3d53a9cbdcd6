"""
Signal Handling - One-shot signal subscriptions.

Each subscription fires at most once: when its signal arrives the OS
handler is removed first, then the callback runs. A second delivery of the
same signal falls through to Python's default disposition unless someone
subscribes again.

Integrates with the asyncio event loop via loop.add_signal_handler().
"""

import asyncio
import itertools
import signal
from collections.abc import Callable
from dataclasses import dataclass

import structlog

__all__ = ["SignalSubscription", "SignalSubscriptions"]

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SignalSubscription:
    """A registered one-shot signal callback."""

    handle: int
    signum: signal.Signals
    callback: Callable[[signal.Signals], None]


class SignalSubscriptions:
    """Table of one-shot signal subscriptions keyed by handle.

    Example:
        subs = SignalSubscriptions()
        subs.subscribe(signal.SIGTERM, lambda sig: stop_event.set())
        ...
        subs.cancel_all()
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._subscriptions: dict[int, SignalSubscription] = {}
        self._handles = itertools.count(1)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def __len__(self) -> int:
        return len(self._subscriptions)

    def active(self) -> list[signal.Signals]:
        """Signals with a live subscription."""
        return [sub.signum for sub in self._subscriptions.values()]

    def subscribe(
        self,
        signum: signal.Signals,
        callback: Callable[[signal.Signals], None],
    ) -> int:
        """Install a one-shot handler for ``signum``.

        Returns:
            Handle for cancel()

        Raises:
            ValueError: If ``signum`` already has a live subscription
        """
        if signum in self.active():
            raise ValueError(f"{signum.name} is already subscribed")

        handle = next(self._handles)
        self._subscriptions[handle] = SignalSubscription(handle, signum, callback)
        self.loop.add_signal_handler(signum, self.fire, handle)
        logger.debug("signal_subscribed", signal=signum.name, handle=handle)
        return handle

    def cancel(self, handle: int) -> bool:
        """Remove a subscription and its OS handler.

        Returns:
            True if the subscription existed
        """
        sub = self._subscriptions.pop(handle, None)
        if sub is None:
            return False
        self.loop.remove_signal_handler(sub.signum)
        logger.debug("signal_unsubscribed", signal=sub.signum.name, handle=handle)
        return True

    def cancel_all(self) -> None:
        for handle in list(self._subscriptions):
            self.cancel(handle)

    def fire(self, handle: int) -> None:
        """Deliver a signal: unsubscribe first, then run the callback."""
        sub = self._subscriptions.get(handle)
        if sub is None:
            return
        self.cancel(handle)
        sub.callback(sub.signum)
