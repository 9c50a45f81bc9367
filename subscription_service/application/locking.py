"""Per-record mutual exclusion for ledger operations."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class KeyedLockRegistry:
    """Hands out one ``asyncio.Lock`` per record key.

    Operations on the same key are serialized while operations on
    different keys run in parallel. A key's lock is dropped as soon as
    nobody holds or waits for it, so the registry does not grow with the
    number of records ever touched.

    Callers taking more than one lock must always take them in the same
    order (subscription pair before provider).
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._users: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


def subscription_lock_key(provider_id: str, subscriber: str) -> tuple[str, str, str]:
    return ("subscription", provider_id, subscriber)


def provider_lock_key(provider_id: str) -> tuple[str, str]:
    return ("provider", provider_id)
