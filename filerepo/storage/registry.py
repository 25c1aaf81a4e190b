import logging
import re
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .codec import DEFAULT_INDENT, JsonCodec
from .collection import Collection
from .errors import InvalidCollectionName
from .pipeline import new_id

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")


class CollectionRegistry:
    """JSON-on-disk collections: one file per collection under ``data_dir``.

    Hands out exactly one ``Collection`` per name, so every caller of a given
    collection shares its lock and cache.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        indent: int = DEFAULT_INDENT,
        strict_decode: bool = False,
        lock_timeout: Optional[float] = None,
        id_factory: Callable[[], str] = new_id,
    ):
        self.indent = indent
        self.strict_decode = strict_decode
        self.lock_timeout = lock_timeout
        self.id_factory = id_factory
        self._collections: Dict[str, Collection] = {}
        self._guard = threading.Lock()
        self.data_dir = None
        if data_dir is not None:
            self.configure(data_dir)

    def init_app(self, app):
        self.indent = app.config.get("JSON_INDENT", DEFAULT_INDENT)
        self.strict_decode = app.config.get("STRICT_DECODE", False)
        self.lock_timeout = app.config.get("LOCK_TIMEOUT")
        self.configure(app.config["DATA_DIR"])
        app.extensions["filerepo"] = self

    def configure(self, data_dir: Path):
        """Point the registry at ``data_dir``, dropping any handles already issued."""
        with self._guard:
            self.data_dir = Path(data_dir)
            self.data_dir.mkdir(parents=True, exist_ok=True)
            self._collections.clear()

    def _path(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def collection(self, name: str) -> Collection:
        if not isinstance(name, str) or not _NAME_RE.fullmatch(name) or ".." in name:
            raise InvalidCollectionName(name)
        if self.data_dir is None:
            raise RuntimeError("CollectionRegistry has no data_dir; call configure() or init_app()")

        with self._guard:
            coll = self._collections.get(name)
            if coll is None:
                coll = Collection(
                    name,
                    self._path(name),
                    codec=JsonCodec(indent=self.indent, strict=self.strict_decode),
                    lock_timeout=self.lock_timeout,
                    id_factory=self.id_factory,
                )
                coll.file.ensure_exists()
                self._collections[name] = coll
                logger.debug("Opened collection %s at %s", name, coll.path)
            return coll

    def names(self) -> List[str]:
        if self.data_dir is None or not self.data_dir.exists():
            return []
        return sorted(p.stem for p in self.data_dir.glob("*.json"))

    def __contains__(self, name: str) -> bool:
        return name in self.names()
