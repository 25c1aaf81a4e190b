import copy
from typing import Any, Dict, List, Optional


class RecordCache:
    """In-memory mirror of one collection's decoded records.

    Only the mutation pipeline writes to it. Values are deep-copied in and out
    so callers never hold references into the cached state.
    """

    def __init__(self):
        self._records: Optional[List[Dict[str, Any]]] = None

    @property
    def present(self) -> bool:
        return self._records is not None

    def get(self) -> Optional[List[Dict[str, Any]]]:
        if self._records is None:
            return None
        return copy.deepcopy(self._records)

    def put(self, records: List[Dict[str, Any]]):
        self._records = copy.deepcopy(list(records))

    def clear(self):
        self._records = None
