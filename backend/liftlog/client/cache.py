"""Keyed view-model cache with optimistic writes that can be undone one at a time.

Each entry keeps the last authoritative data (its base) plus the optimistic
transforms still waiting on the server, in the order they were applied. The
visible data is always base with those transforms replayed on top, so
rolling one back drops only that transform: writes from other in-flight
mutations survive, and an earlier failed write never reappears.

Entries are replaced, never mutated in place: transforms receive a private
deep copy and snapshots hold their own deep copy.

All methods except the refetch machinery are synchronous. On a single event
loop that makes cancel -> snapshot -> apply atomic with respect to any other
mutation or refetch on the same key.
"""
from __future__ import annotations

import asyncio
import copy
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Hashable, Optional

from liftlog.client.api import ClientError

logger = logging.getLogger(__name__)

Key = Hashable
Transform = Callable[[Any], Any]
Fetcher = Callable[[], Awaitable[Any]]

# base of an entry that only holds optimistic writes
_ABSENT = object()


@dataclass(slots=True)
class CacheEntry:
    data: Any
    version: int = 0
    stale: bool = False
    base: Any = _ABSENT
    pending: dict[int, Transform] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Snapshot:
    key: Key
    data: Any
    version: int
    existed: bool
    token: Optional[int] = None


class OptimisticCache:
    def __init__(self) -> None:
        self._entries: dict[Key, CacheEntry] = {}
        self._fetchers: dict[Key, Fetcher] = {}
        self._refetches: dict[Key, set[asyncio.Task]] = {}
        self._tokens = itertools.count(1)

    # reads

    def get(self, key: Key) -> Any:
        """Current data for key (None if absent). Treat as read-only."""
        entry = self._entries.get(key)
        return entry.data if entry else None

    def version(self, key: Key) -> int:
        entry = self._entries.get(key)
        return entry.version if entry else 0

    def is_stale(self, key: Key) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def pending(self, key: Key) -> int:
        """Number of optimistic writes on key still waiting to settle."""
        entry = self._entries.get(key)
        return len(entry.pending) if entry else 0

    # writes

    def set(self, key: Key, data: Any) -> int:
        """Store authoritative data; in-flight optimistic writes are replayed on top."""
        entry = self._entries.get(key)
        pending = entry.pending if entry else {}
        return self._rebuild(key, data, pending, stale=False)

    def snapshot(self, key: Key) -> Snapshot:
        entry = self._entries.get(key)
        if entry is None:
            return Snapshot(key=key, data=None, version=0, existed=False)
        return Snapshot(key=key, data=copy.deepcopy(entry.data), version=entry.version, existed=True)

    def apply(self, key: Key, transform: Transform) -> Snapshot:
        """Snapshot key, then layer transform on top as an optimistic write.

        The returned snapshot is the handle for confirm() or rollback().
        """
        snap = self.snapshot(key)
        token = next(self._tokens)
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CacheEntry(data=None)
        entry.data = transform(copy.deepcopy(entry.data))
        entry.version += 1
        entry.pending[token] = transform
        return Snapshot(key=snap.key, data=snap.data, version=snap.version, existed=snap.existed, token=token)

    def update(self, key: Key, transform: Transform) -> int:
        """Apply transform to the authoritative data, keeping optimistic writes on top."""
        entry = self._entries.get(key)
        if entry is None or entry.base is _ABSENT:
            base = transform(None)
        else:
            base = transform(copy.deepcopy(entry.base))
        return self.set(key, base)

    def commit(self, key: Key, data: Any) -> int:
        """Store authoritative server data."""
        return self.set(key, data)

    def confirm(self, snap: Snapshot) -> None:
        """The server accepted snap's write: fold it into the authoritative data."""
        entry = self._entries.get(snap.key)
        if entry is None or snap.token not in entry.pending:
            return
        transform = entry.pending.pop(snap.token)
        base = None if entry.base is _ABSENT else copy.deepcopy(entry.base)
        entry.base = transform(base)

    def rollback(self, snap: Snapshot) -> None:
        """Drop snap's write and replay whatever else is still in flight."""
        entry = self._entries.get(snap.key)
        if entry is None:
            return
        entry.pending.pop(snap.token, None)
        if entry.base is _ABSENT and not entry.pending:
            del self._entries[snap.key]
            return
        self._rebuild(snap.key, entry.base, entry.pending, stale=entry.stale)

    def _rebuild(self, key: Key, base: Any, pending: dict[int, Transform], *, stale: bool) -> int:
        data = None if base is _ABSENT else base
        for transform in pending.values():
            data = transform(copy.deepcopy(data))
        old = self._entries.get(key)
        version = (old.version if old else 0) + 1
        self._entries[key] = CacheEntry(
            data=data,
            version=version,
            stale=stale,
            base=base,
            pending=dict(pending),
        )
        return version

    # refetching

    def register_fetcher(self, key: Key, fetcher: Fetcher) -> None:
        self._fetchers[key] = fetcher

    def invalidate(self, key: Key) -> Optional[asyncio.Task]:
        """Mark key stale and, if it has a fetcher, refetch in the background."""
        entry = self._entries.get(key)
        if entry is not None:
            entry.stale = True
        fetcher = self._fetchers.get(key)
        if fetcher is None:
            return None
        task = asyncio.create_task(self._refetch(key, fetcher))
        tasks = self._refetches.setdefault(key, set())
        tasks.add(task)
        task.add_done_callback(tasks.discard)
        return task

    def cancel_refetches(self, key: Key) -> int:
        """Cancel in-flight refetches for key so none lands on top of a newer write."""
        tasks = self._refetches.get(key, set())
        cancelled = 0
        for task in list(tasks):
            if task.cancel():
                cancelled += 1
        tasks.clear()
        return cancelled

    async def wait_refetches(self, key: Key) -> None:
        tasks = list(self._refetches.get(key, ()))
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _refetch(self, key: Key, fetcher: Fetcher) -> None:
        try:
            data = await fetcher()
        except ClientError as e:
            # Entry stays stale; the next invalidate tries again
            logger.warning("refetch of %r failed: %s", key, e)
            return
        self.commit(key, data)
        logger.debug("refetched %r -> v%d", key, self.version(key))
