import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from .codec import JsonCodec

logger = logging.getLogger(__name__)


class CollectionFile:
    """The JSON file backing one collection."""

    def __init__(self, path: Path, codec: JsonCodec):
        self.path = Path(path)
        self.codec = codec

    def ensure_exists(self) -> bool:
        """Create the parent directory and an empty collection file if missing.

        Returns True when the file had to be created.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.path.exists():
            return False
        self._write_text(self.codec.encode([]))
        logger.info("Created empty collection file %s", self.path)
        return True

    async def load(self) -> List[Dict[str, Any]]:
        text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        return self.codec.decode(text, source=str(self.path))

    async def save(self, records: List[Dict[str, Any]]):
        encoded = self.codec.encode(records)
        await asyncio.to_thread(self._write_text, encoded)
        logger.debug("Wrote %d records to %s", len(records), self.path)

    def _write_text(self, text: str):
        # Readers see either the old or the new file, never a partial one.
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            with tmp.open("w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
