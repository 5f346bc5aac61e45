class StorageError(Exception):
    """A document could not be read from or decoded by the backing store."""


class PersistenceError(Exception):
    """A mutation could not be written; in-memory state was left unchanged."""

    def __init__(self, key, cause=None):
        self.key = key
        self.cause = cause
        super().__init__(f"Failed to persist document '{key}': {cause}")
