import asyncio
import logging
import uuid
from typing import Any, Callable, Dict, List, Tuple

from .cache import RecordCache
from .errors import RepoError
from .files import CollectionFile
from .lock import CollectionLock

logger = logging.getLogger(__name__)

ID_FIELD = "_id"
MAX_ID_ATTEMPTS = 10

Record = Dict[str, Any]
Transform = Callable[[List[Record]], Tuple[List[Record], Any]]


def new_id() -> str:
    return str(uuid.uuid4())


# Transforms: pure functions from the current records to (new records, result).

def create_record(record: Record, id_factory: Callable[[], str] = new_id) -> Transform:
    def transform(records):
        taken = {r.get(ID_FIELD) for r in records}
        for _ in range(MAX_ID_ATTEMPTS):
            record_id = id_factory()
            if record_id and record_id not in taken:
                break
        else:
            raise RepoError("could not generate an unused record identifier")
        created = dict(record)
        created[ID_FIELD] = record_id
        return records + [created], created

    return transform


def update_record(record: Record) -> Transform:
    record_id = record.get(ID_FIELD)

    def transform(records):
        replaced = [dict(record) if r.get(ID_FIELD) == record_id else r for r in records]
        return replaced, record

    return transform


def patch_record(record_id: str, partial: Record) -> Transform:
    def transform(records):
        patched = [
            {**r, **partial, ID_FIELD: record_id} if r.get(ID_FIELD) == record_id else r
            for r in records
        ]
        return patched, record_id

    return transform


def delete_record(record_id: str) -> Transform:
    def transform(records):
        return [r for r in records if r.get(ID_FIELD) != record_id], record_id

    return transform


class MutationPipeline:
    """Locked read-transform-write-cache sequence for one collection.

    The cache is consulted first; the file is read only on a cache miss. A
    failed write propagates and leaves the cache as it was. Once the write has
    started it runs to completion, cache update included, even if the caller
    is cancelled.
    """

    def __init__(self, name: str, file: CollectionFile, cache: RecordCache, lock: CollectionLock):
        self.name = name
        self.file = file
        self.cache = cache
        self.lock = lock

    async def run(self, transform: Transform) -> Any:
        async with self.lock.hold():
            records = self.cache.get()
            if records is None:
                logger.debug("Cache miss for collection %s; loading %s", self.name, self.file.path)
                records = await self.file.load()
                self.cache.put(records)

            new_records, result = transform(records)
            await self._commit_to_completion(new_records)
            return result

    async def _commit(self, records: List[Record]):
        await self.file.save(records)
        self.cache.put(records)

    async def _commit_to_completion(self, records: List[Record]):
        # The write thread keeps running when the caller is cancelled, so the
        # cache update must still happen and the lock stays held until it has.
        commit = asyncio.ensure_future(self._commit(records))
        cancelled = False
        while not commit.done():
            try:
                await asyncio.shield(commit)
            except asyncio.CancelledError:
                cancelled = True
        if cancelled:
            logger.warning("Mutation on collection %s cancelled after its write began; write kept", self.name)
            raise asyncio.CancelledError()
        commit.result()
