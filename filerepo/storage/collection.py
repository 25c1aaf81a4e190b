from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .cache import RecordCache
from .codec import JsonCodec
from .errors import MissingIdentifierError
from .files import CollectionFile
from .lock import CollectionLock
from .pipeline import (
    ID_FIELD,
    MutationPipeline,
    create_record,
    delete_record,
    new_id,
    patch_record,
    update_record,
)

Predicate = Callable[[Dict[str, Any]], bool]


class Collection:
    """Handle for one named collection backed by a single JSON file.

    create/update/patch/delete go through the locked mutation pipeline;
    query and get read the file directly without taking the lock, so they
    may observe the state just before or just after an in-flight mutation.

    update/patch/delete on an identifier that does not exist succeed
    without changing anything.
    """

    def __init__(
        self,
        name: str,
        path: Path,
        codec: Optional[JsonCodec] = None,
        lock_timeout: Optional[float] = None,
        id_factory: Callable[[], str] = new_id,
    ):
        self.name = name
        self.file = CollectionFile(path, codec or JsonCodec())
        self.cache = RecordCache()
        self.lock = CollectionLock(name, timeout=lock_timeout)
        self.id_factory = id_factory
        self._pipeline = MutationPipeline(name, self.file, self.cache, self.lock)

    @property
    def path(self) -> Path:
        return self.file.path

    async def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return await self._pipeline.run(create_record(record, self.id_factory))

    async def update(self, record: Dict[str, Any]) -> Dict[str, Any]:
        if not record.get(ID_FIELD):
            raise MissingIdentifierError(f"cannot update a record without '{ID_FIELD}'")
        return await self._pipeline.run(update_record(record))

    async def patch(self, record_id: str, partial: Dict[str, Any]) -> str:
        return await self._pipeline.run(patch_record(record_id, partial))

    async def delete(self, record_id: str) -> str:
        return await self._pipeline.run(delete_record(record_id))

    async def query(self, predicate: Optional[Predicate] = None) -> List[Dict[str, Any]]:
        records = await self.file.load()
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]

    async def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        matches = await self.query(lambda r: r.get(ID_FIELD) == record_id)
        return matches[0] if matches else None

    def __repr__(self):
        return f"Collection({self.name!r}, {str(self.path)!r})"
