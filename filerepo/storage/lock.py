import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from .errors import LockTimeoutError

logger = logging.getLogger(__name__)


class CollectionLock:
    """Per-collection gate that admits one mutation at a time.

    Waiters queue on an ``asyncio.Lock`` and are woken in arrival order when
    the holder releases, so there is no polling and no race between waiters.
    Must be used from a single event loop.
    """

    def __init__(self, name: str, timeout: Optional[float] = None):
        self.name = name
        self.timeout = timeout
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def acquire(self, timeout: Optional[float] = None):
        timeout = self.timeout if timeout is None else timeout
        if timeout is None:
            await self._lock.acquire()
            return
        try:
            await asyncio.wait_for(self._lock.acquire(), timeout)
        except asyncio.TimeoutError:
            logger.warning("Lock wait on collection %s exceeded %ss", self.name, timeout)
            raise LockTimeoutError(self.name, timeout) from None

    def release(self):
        self._lock.release()

    @asynccontextmanager
    async def hold(self, timeout: Optional[float] = None):
        await self.acquire(timeout)
        try:
            yield self
        finally:
            self.release()
