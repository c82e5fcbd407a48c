"""Per-resource write serialization"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class ResourceLocks:
    """One asyncio.Lock per resource ID.

    Holding the lock for a resource makes an availability check and the
    write that depends on it a single step for every writer in this process.
    """

    def __init__(self):
        # Never pruned: one entry per room for the life of the process.
        self._locks: Dict[int, asyncio.Lock] = {}

    def lock_for(self, resource_id: int) -> asyncio.Lock:
        lock = self._locks.get(resource_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[resource_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, resource_id: int) -> AsyncIterator[None]:
        async with self.lock_for(resource_id):
            yield
