"""Per-item write serialization."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class ItemLocks:
    """One asyncio.Lock per item while anyone holds or waits on it.

    Reads never take these locks. An entry is dropped once its last user
    leaves, so idle items cost nothing.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, item_id: str) -> AsyncIterator[None]:
        lock = self._locks.get(item_id)
        if lock is None:
            lock = self._locks[item_id] = asyncio.Lock()
        self._users[item_id] = self._users.get(item_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[item_id] -= 1
            if not self._users[item_id]:
                del self._users[item_id]
                del self._locks[item_id]

    def locked(self, item_id: str) -> bool:
        lock = self._locks.get(item_id)
        return lock is not None and lock.locked()
