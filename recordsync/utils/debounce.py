"""
Trailing-edge debouncer for asyncio callers.

Each call reschedules the wrapped coroutine function; only the last call
within the delay window runs. Used in front of RecordsStore.search_records so
typing does not issue a search per keystroke.
"""
import asyncio
from typing import Any, Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class Debouncer:
    """Debounce calls to an async function."""

    def __init__(self, func: Callable[..., Awaitable[Any]], delay: float):
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self.func = func
        self.delay = delay
        # Task still inside its delay window; only this one can be superseded
        self._waiting: Optional[asyncio.Task] = None
        self._last: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._waiting is not None and not self._waiting.done()

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Task:
        """Schedule func(*args, **kwargs) after the delay, superseding any waiting call."""
        self.cancel()
        task = asyncio.ensure_future(self._run(args, kwargs))
        self._waiting = task
        self._last = task
        return task

    async def _run(self, args, kwargs) -> Any:
        await asyncio.sleep(self.delay)
        # Past the window: the call can no longer be superseded, so the
        # wrapped action always runs to completion and settles its state.
        self._waiting = None
        return await self.func(*args, **kwargs)

    def cancel(self) -> None:
        """Drop the call waiting out its delay, if any."""
        if self._waiting is not None and not self._waiting.done():
            self._waiting.cancel()
            logger.debug("Debounced call superseded")
        self._waiting = None

    async def flush(self) -> Any:
        """Wait for the most recent call and return its result (None if it was superseded)."""
        task, self._last = self._last, None
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled():
                return None
            raise
