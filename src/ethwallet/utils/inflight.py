"""Coalescing of concurrent async work per key.

Concurrent callers asking for the same key share one running task
instead of each starting their own.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Hashable, Optional

logger = logging.getLogger(__name__)


class InflightRegistry:
    """Registry of in-flight tasks keyed by request identity.

    The check-and-register step in run() contains no await, so on a
    single event loop no two tasks can be started for the same key.
    Entries are removed by a done-callback, which fires on success,
    failure and cancellation alike.

    Example:
        registry = InflightRegistry()
        result = await registry.run(address, lambda: fetch(address))
    """

    def __init__(self):
        self._tasks: dict[Hashable, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._tasks

    def get(self, key: Hashable) -> Optional[asyncio.Task]:
        """Return the running task for a key, if any."""
        return self._tasks.get(key)

    async def run(self, key: Hashable, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Await the in-flight task for ``key``, starting it if absent.

        Args:
            key: Request identity
            factory: Zero-argument callable returning the coroutine to run

        Returns:
            The task's result, identical for every attached caller
        """
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(lambda t: self._discard(key, t))
        else:
            logger.debug(f"Attaching to in-flight request for {key}")

        # A caller giving up must not cancel the work for the others
        return await asyncio.shield(task)

    def _discard(self, key: Hashable, task: asyncio.Task) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]

    def clear(self) -> None:
        """Forget all in-flight entries (useful for testing)."""
        self._tasks.clear()
