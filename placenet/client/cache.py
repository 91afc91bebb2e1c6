"""
Client-side query cache.

Keys are API paths ("/api/recruiter/applications"); values are whatever the
endpoint returned. Each entry carries a stale flag and a revision counter.
Any write bumps the revision, so a refetch that started before the write
notices on completion and throws its (older) result away. While a mutation
on a key is pending, fetch() serves the optimistic value without loading.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict


@dataclass
class CacheEntry:
    value: Any
    stale: bool = False


@dataclass
class Snapshot:
    """Exact copy of one key taken before an optimistic write."""
    key: str
    present: bool
    value: Any = None
    stale: bool = False


@dataclass
class QueryCache:
    entries: Dict[str, CacheEntry] = field(default_factory=dict)
    revisions: Dict[str, int] = field(default_factory=dict)
    pending: Dict[str, int] = field(default_factory=dict)

    def _bump(self, key: str) -> None:
        self.revisions[key] = self.revisions.get(key, 0) + 1

    def revision(self, key: str) -> int:
        return self.revisions.get(key, 0)

    def has(self, key: str) -> bool:
        return key in self.entries

    def get(self, key: str, default: Any = None) -> Any:
        entry = self.entries.get(key)
        return entry.value if entry is not None else default

    def set(self, key: str, value: Any) -> None:
        self.entries[key] = CacheEntry(value)
        self._bump(key)

    def update(self, key: str, fn: Callable[[Any], Any]) -> None:
        """Replace the value with fn(current). Keeps the stale flag."""
        entry = self.entries.get(key)
        stale = entry.stale if entry is not None else False
        self.entries[key] = CacheEntry(fn(entry.value if entry is not None else None), stale)
        self._bump(key)

    def remove(self, key: str) -> None:
        self.entries.pop(key, None)
        self._bump(key)

    def invalidate(self, key: str) -> None:
        """Mark stale; the next fetch() reloads it. Never triggers a load itself."""
        entry = self.entries.get(key)
        if entry is not None:
            entry.stale = True

    def is_stale(self, key: str) -> bool:
        entry = self.entries.get(key)
        return entry is None or entry.stale

    def cancel(self, key: str) -> None:
        """Discard the result of any fetch for key already in flight."""
        self._bump(key)

    def begin_mutation(self, key: str) -> None:
        self.pending[key] = self.pending.get(key, 0) + 1

    def end_mutation(self, key: str) -> None:
        remaining = self.pending.get(key, 0) - 1
        if remaining > 0:
            self.pending[key] = remaining
        else:
            self.pending.pop(key, None)

    def is_pending(self, key: str) -> bool:
        """True while an optimistic mutation on key has not settled."""
        return key in self.pending

    def snapshot(self, key: str) -> Snapshot:
        entry = self.entries.get(key)
        if entry is None:
            return Snapshot(key, present=False)
        return Snapshot(key, present=True, value=copy.deepcopy(entry.value), stale=entry.stale)

    def restore(self, snapshot: Snapshot) -> None:
        if not snapshot.present:
            self.remove(snapshot.key)
            return
        self.entries[snapshot.key] = CacheEntry(copy.deepcopy(snapshot.value), snapshot.stale)
        self._bump(snapshot.key)

    async def fetch(self, key: str, loader: Callable[[], Awaitable[Any]], force: bool = False) -> Any:
        """
        Return the cached value, loading it first when missing or stale.

        A load whose key was written (or cancelled) while it ran is dropped
        and the current cached value is returned instead. No load starts
        while a mutation on the key is pending.
        """
        if self.is_pending(key):
            return self.get(key)
        if not force and not self.is_stale(key):
            return self.get(key)

        started_at = self.revision(key)
        value = await loader()
        if self.revision(key) != started_at:
            return self.get(key, value)
        self.set(key, value)
        return value

