import json
import logging
from typing import Any, Dict, List, Optional

from .errors import CorruptCollectionError

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 3


class JsonCodec:
    """Reads and writes the on-disk form of a collection: a JSON array of objects.

    The lenient codec (the default) never fails on bad content: anything that
    is not a JSON array of objects is logged and treated as an empty
    collection. With ``strict=True`` the same condition raises
    ``CorruptCollectionError`` instead.
    """

    def __init__(self, indent: int = DEFAULT_INDENT, strict: bool = False):
        self.indent = indent
        self.strict = strict

    def encode(self, records: List[Dict[str, Any]]) -> str:
        return json.dumps(records, indent=self.indent, ensure_ascii=False) + "\n"

    def decode(self, text: str, source: Optional[str] = None) -> List[Dict[str, Any]]:
        where = source or "<memory>"
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            return self._malformed(where, f"invalid JSON: {e}")

        if not isinstance(data, list):
            return self._malformed(where, f"expected a JSON array, got {type(data).__name__}")
        if not all(isinstance(item, dict) for item in data):
            return self._malformed(where, "array contains non-object entries")
        return data

    def _malformed(self, where: str, reason: str) -> List[Dict[str, Any]]:
        if self.strict:
            raise CorruptCollectionError(where, reason)
        logger.error("Malformed collection file %s (%s); treating as empty", where, reason)
        return []
