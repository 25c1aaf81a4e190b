class RepoError(Exception):
    """Base class for errors raised by the collection store."""


class CorruptCollectionError(RepoError):
    """A collection file could not be decoded (strict mode only)."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"collection file {path} is corrupt: {reason}")


class LockTimeoutError(RepoError, TimeoutError):
    def __init__(self, collection: str, timeout: float):
        self.collection = collection
        self.timeout = timeout
        super().__init__(f"timed out after {timeout}s waiting for collection '{collection}'")


class InvalidCollectionName(RepoError, ValueError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"invalid collection name: {name!r}")


class MissingIdentifierError(RepoError, ValueError):
    """update() was handed a record that carries no identifier."""
