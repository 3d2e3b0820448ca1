"""
Deferred callbacks on the asyncio event loop.

Everything runs on one loop thread: `later` is fire-and-forget, `settle`
collapses repeated triggers for the same key into one callback when
coalescing is on. With coalescing off every trigger schedules its own
callback, which is how the live page behaves.
"""

import asyncio
from typing import Any, Callable, Dict, Hashable, Optional

from storefront.logging import get_logger

logger = get_logger(__name__)


class Scheduler:
    """Fixed-delay timers with best-effort callbacks."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None, coalesce: bool = True) -> None:
        self._loop = loop
        self.coalesce = coalesce
        self._pending: Dict[Hashable, asyncio.TimerHandle] = {}

    @classmethod
    def from_settings(cls, settings, loop: Optional[asyncio.AbstractEventLoop] = None) -> "Scheduler":
        return cls(loop=loop, coalesce=settings.settle_coalesce)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        """Run callback after delay; exceptions are logged, never raised."""
        return self.loop.call_later(delay, self._run, callback, args)

    def settle(self, key: Hashable, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        """
        Schedule callback once the key has been quiet for delay.

        A newer trigger for the same key replaces the pending one.
        """
        if not self.coalesce:
            return self.later(delay, callback, *args)

        previous = self._pending.pop(key, None)
        if previous is not None:
            previous.cancel()

        handle = self.loop.call_later(delay, self._run_settled, key, callback, args)
        self._pending[key] = handle
        return handle

    def pending(self, key: Hashable) -> bool:
        return key in self._pending

    def _run_settled(self, key: Hashable, callback: Callable[..., Any], args: tuple) -> None:
        self._pending.pop(key, None)
        self._run(callback, args)

    @staticmethod
    def _run(callback: Callable[..., Any], args: tuple) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception(f"Deferred callback {getattr(callback, '__name__', callback)!r} failed")
