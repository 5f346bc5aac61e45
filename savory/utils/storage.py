import json
import logging
import os

from sqlalchemy.exc import SQLAlchemyError

from savory.errors import PersistenceError, StorageError

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Key-value store of JSON documents.

    `load` returns the decoded document or None when the key was never
    written, and raises StorageError when the stored body cannot be read or
    decoded. `save` replaces the document and raises PersistenceError on
    failure.
    """

    def load(self, key):
        body = self._read(key)
        if body is None:
            return None
        try:
            return json.loads(body)
        except ValueError as e:
            raise StorageError(f"Malformed document '{key}': {e}") from e

    def save(self, key, value):
        body = json.dumps(value)
        try:
            self._write(key, body)
        except PersistenceError:
            raise
        except (OSError, SQLAlchemyError) as e:
            logger.error("Failed to write document %s: %s", key, e)
            raise PersistenceError(key, e) from e

    def _read(self, key):
        raise NotImplementedError

    def _write(self, key, body):
        raise NotImplementedError


class MemoryStore(DocumentStore):
    """Keeps serialized documents in a dict; used by tests and throwaway runs."""

    def __init__(self, documents=None):
        self.documents = {}
        for key, value in (documents or {}).items():
            self.documents[key] = value if isinstance(value, str) else json.dumps(value)

    def _read(self, key):
        return self.documents.get(key)

    def _write(self, key, body):
        self.documents[key] = body


class JsonFileStore(DocumentStore):
    """One `<key>.json` file per document inside `directory`."""

    def __init__(self, directory):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def path_for(self, key):
        return os.path.join(self.directory, f"{key.replace(':', '__')}.json")

    def _read(self, key):
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Cannot read document '{key}': {e}") from e

    def _write(self, key, body):
        path = self.path_for(key)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(body)
        os.replace(tmp_path, path)


class SqlDocumentStore(DocumentStore):
    """Documents kept in the `documents` table through Flask-SQLAlchemy."""

    def __init__(self, db):
        self.db = db

    def _read(self, key):
        from savory.models.document import StoredDocument

        try:
            document = self.db.session.get(StoredDocument, key)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot read document '{key}': {e}") from e
        return document.body if document else None

    def _write(self, key, body):
        from savory.models.document import StoredDocument

        try:
            document = self.db.session.get(StoredDocument, key)
            if document:
                document.body = body
            else:
                self.db.session.add(StoredDocument(key=key, body=body))
            self.db.session.commit()
        except SQLAlchemyError:
            self.db.session.rollback()
            raise


def build_store(config, db=None):
    """Pick the backend named by STORAGE_BACKEND."""
    backend = config.get('STORAGE_BACKEND', 'sql')
    if backend == 'memory':
        return MemoryStore()
    if backend == 'file':
        return JsonFileStore(config['STORAGE_DIR'])
    if backend == 'sql':
        return SqlDocumentStore(db)
    raise ValueError(f"Unknown storage backend: {backend}")
