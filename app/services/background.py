# app/services/background.py
from __future__ import annotations

"""
ReelVault — Fire-and-forget task dispatch
=========================================

A tiny unordered queue on the running event loop for side effects that must
not hold up a response (e.g. bumping `views` after a stream starts).

Guarantees (and non-guarantees)
-------------------------------
- At most once, best effort: a task may be lost if the process dies.
- No ordering relative to the HTTP response or to other tasks.
- Failures are logged and never propagate to the dispatcher's caller.
- In-flight tasks are strongly referenced until done (asyncio only keeps weak
  references), and `drain()` awaits whatever is still running (shutdown, tests).
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Set

logger = logging.getLogger(__name__)


class TaskDispatcher:
    """Unordered background work queue bound to the current event loop."""

    def __init__(self) -> None:
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, fn: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> asyncio.Task:
        """Schedule `fn(*args, **kwargs)` without awaiting it."""
        task = asyncio.create_task(self._run(fn, *args, **kwargs))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @staticmethod
    async def _run(fn: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> None:
        name = getattr(fn, "__qualname__", repr(fn))
        try:
            await fn(*args, **kwargs)
        except asyncio.CancelledError:
            logger.info("Background task %s cancelled", name)
            raise
        except Exception:
            logger.exception("Background task %s failed", name)

    async def drain(self) -> None:
        """Wait for every in-flight task (errors are already logged by `_run`)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


_dispatcher = TaskDispatcher()


def get_dispatcher() -> TaskDispatcher:
    """FastAPI dependency: the process-wide dispatcher."""
    return _dispatcher


__all__ = ["TaskDispatcher", "get_dispatcher"]
