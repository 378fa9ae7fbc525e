"""
Single-flight cache of directory checkers
"""

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Tuple

from .errors import ResolverClosedError
from ignore_filter.utils import get_logger

logger = get_logger(__name__)

CacheKey = Tuple[Path, Path]


class CheckerCache:
    """
    Maps (directory, boundary) to the task resolving its checker.

    An entry is inserted synchronously when a resolution starts, so every later
    caller awaits the same task instead of starting a second one. Failed
    resolutions are evicted once they complete; successful ones stay until
    clear().
    """

    def __init__(self):
        self._entries: Optional[Dict[CacheKey, asyncio.Task]] = {}
        self._hits = 0
        self._misses = 0

    @property
    def closed(self) -> bool:
        return self._entries is None

    def get_or_start(self, key: CacheKey, factory: Callable[[], Awaitable]) -> asyncio.Task:
        """
        Return the task for `key`, starting `factory()` if there is none

        Must be called from a running event loop. There is no await between
        the lookup and the insertion.
        """
        if self._entries is None:
            raise ResolverClosedError("ignore resolver used after cleanup()")

        task = self._entries.get(key)
        if task is not None:
            self._hits += 1
            return task

        self._misses += 1
        task = asyncio.ensure_future(factory())
        self._entries[key] = task
        task.add_done_callback(lambda done: self._on_done(key, done))
        return task

    def _on_done(self, key: CacheKey, task: asyncio.Task):
        if not task.cancelled() and task.exception() is None:
            return
        # Failed: the next request for this key starts over
        if self._entries is not None and self._entries.get(key) is task:
            del self._entries[key]
            logger.debug(f"Evicted failed resolution of {key[0]}")

    def __contains__(self, key: CacheKey) -> bool:
        return self._entries is not None and key in self._entries

    def __len__(self) -> int:
        return len(self._entries) if self._entries is not None else 0

    def clear(self):
        """Drop every entry; the cache cannot be used afterwards"""
        self._entries = None

    def get_stats(self) -> Dict[str, int]:
        """Get cache statistics"""
        entries = self._entries or {}
        pending = sum(1 for task in entries.values() if not task.done())
        return {
            'size': len(entries),
            'resolved': len(entries) - pending,
            'pending': pending,
            'hits': self._hits,
            'misses': self._misses,
        }
