import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import replace
from datetime import datetime, timezone

from savory.errors import PersistenceError, StorageError
from savory.models.bookmark import Bookmark
from savory.models.folder import DEFAULT_COLOR, DEFAULT_ICON, Folder

logger = logging.getLogger(__name__)

DEFAULT_FOLDERS = (
    ('Favorites', '#ff9f7f', 'heart'),
    ('Try Later', '#7fb1ff', 'clock'),
)

MAX_CACHED_LIBRARIES = 1024


def _now():
    return datetime.now(timezone.utc).isoformat()


class _Library:
    """One user's folders and bookmarks, plus the (recipe_id -> bookmark) index."""

    def __init__(self, folders, bookmarks):
        self.folders = folders
        self.bookmarks = bookmarks
        self.by_recipe = {b.recipe_id: b for b in bookmarks}

    def to_document(self):
        return {
            'folders': [f.to_dict() for f in self.folders],
            'bookmarks': [b.to_dict() for b in self.bookmarks],
        }


class BookmarkStore:
    """
    Folders and bookmarks keyed by user.

    Each user's collections live in a single `library:<user_id>` document so
    a folder delete and its bookmark cascade are written together. A user has
    at most one bookmark per recipe; adding a bookmarked recipe again moves
    the existing bookmark. Every call is a no-op without a user id.
    """

    def __init__(self, store, max_cached_libraries=MAX_CACHED_LIBRARIES):
        self.store = store
        self.max_cached_libraries = max_cached_libraries
        self.lock = threading.RLock()
        self._libraries = OrderedDict()

    @staticmethod
    def document_key(user_id):
        return f"library:{user_id}"

    def _library(self, user_id):
        library = self._libraries.get(user_id)
        if library is not None:
            self._libraries.move_to_end(user_id)
            return library

        document = None
        try:
            document = self.store.load(self.document_key(user_id))
        except StorageError as e:
            logger.error("Error loading bookmarks/folders for %s: %s", user_id, e)

        if isinstance(document, dict):
            library = _Library(
                [Folder.from_dict(f) for f in document.get('folders') or [] if isinstance(f, dict)],
                [Bookmark.from_dict(b) for b in document.get('bookmarks') or [] if isinstance(b, dict)]
            )
        else:
            library = _Library(self._default_folders(user_id), [])
            try:
                self.store.save(self.document_key(user_id), library.to_document())
            except PersistenceError as e:
                logger.error("Could not persist default folders for %s: %s", user_id, e)

        self._cache(user_id, library)
        return library

    def _cache(self, user_id, library):
        # least recently used libraries are dropped; the store stays authoritative
        self._libraries[user_id] = library
        self._libraries.move_to_end(user_id)
        while len(self._libraries) > self.max_cached_libraries:
            self._libraries.popitem(last=False)

    @staticmethod
    def _default_folders(user_id):
        created_at = _now()
        return [
            Folder(id=f"folder_{uuid.uuid4().hex}", name=name, user_id=str(user_id),
                   color=color, icon=icon, created_at=created_at)
            for name, color, icon in DEFAULT_FOLDERS
        ]

    def _commit(self, user_id, folders, bookmarks):
        """Write the new collections, then swap them in; on failure nothing changes."""
        library = _Library(folders, bookmarks)
        self.store.save(self.document_key(user_id), library.to_document())
        self._cache(user_id, library)
        return library

    # Folders

    def get_user_folders(self, user_id):
        if not user_id:
            return []
        with self.lock:
            return list(self._library(user_id).folders)

    def get_folder_by_id(self, user_id, folder_id):
        if not user_id:
            return None
        with self.lock:
            return next((f for f in self._library(user_id).folders if f.id == folder_id), None)

    def create_folder(self, user_id, name, color=DEFAULT_COLOR, icon=DEFAULT_ICON):
        if not user_id:
            return None
        folder = Folder(
            id=f"folder_{uuid.uuid4().hex}",
            name=name,
            user_id=str(user_id),
            color=color or DEFAULT_COLOR,
            icon=icon or DEFAULT_ICON,
            created_at=_now()
        )
        with self.lock:
            library = self._library(user_id)
            self._commit(user_id, library.folders + [folder], library.bookmarks)
        logger.info("Folder %s (%s) created for %s", folder.id, name, user_id)
        return folder

    def update_folder(self, user_id, folder_id, name=None, color=None, icon=None):
        """Merge name/color/icon into the folder; unknown folders are ignored."""
        if not user_id:
            return None
        patch = {k: v for k, v in (('name', name), ('color', color), ('icon', icon)) if v}
        with self.lock:
            library = self._library(user_id)
            folder = next((f for f in library.folders if f.id == folder_id), None)
            if folder is None:
                return None
            updated = replace(folder, **patch)
            folders = [updated if f.id == folder_id else f for f in library.folders]
            self._commit(user_id, folders, library.bookmarks)
        return updated

    def delete_folder(self, user_id, folder_id):
        """Remove the folder together with every bookmark filed in it."""
        if not user_id:
            return False
        with self.lock:
            library = self._library(user_id)
            if not any(f.id == folder_id for f in library.folders):
                return False
            folders = [f for f in library.folders if f.id != folder_id]
            bookmarks = [b for b in library.bookmarks if b.folder_id != folder_id]
            self._commit(user_id, folders, bookmarks)
            removed = len(library.bookmarks) - len(bookmarks)
        logger.info("Folder %s deleted for %s with %d bookmarks", folder_id, user_id, removed)
        return True

    # Bookmarks

    def add_bookmark(self, user_id, recipe_id, folder_id, rating):
        """
        Bookmark a recipe into a folder.

        If the user already bookmarked the recipe the existing bookmark is
        moved to `folder_id` and re-rated instead of adding a second one.
        Returns None when the user has no such folder.
        """
        if not user_id:
            return None
        with self.lock:
            library = self._library(user_id)
            if not any(f.id == folder_id for f in library.folders):
                return None

            existing = library.by_recipe.get(recipe_id)
            if existing is not None:
                return self.update_bookmark(user_id, existing.id, folder_id=folder_id, rating=rating)

            bookmark = Bookmark(
                id=f"bookmark_{uuid.uuid4().hex}",
                recipe_id=recipe_id,
                user_id=str(user_id),
                folder_id=folder_id,
                rating=rating,
                created_at=_now()
            )
            self._commit(user_id, folders=library.folders, bookmarks=library.bookmarks + [bookmark])
        return bookmark

    def update_bookmark(self, user_id, bookmark_id, folder_id=None, rating=None):
        """Move and/or re-rate a bookmark; None for an unknown bookmark or a folder the user lacks."""
        if not user_id:
            return None
        patch = {}
        if folder_id is not None:
            patch['folder_id'] = folder_id
        if rating is not None:
            patch['rating'] = rating
        with self.lock:
            library = self._library(user_id)
            if folder_id is not None and not any(f.id == folder_id for f in library.folders):
                return None
            bookmark = next((b for b in library.bookmarks if b.id == bookmark_id), None)
            if bookmark is None:
                return None
            updated = replace(bookmark, **patch)
            bookmarks = [updated if b.id == bookmark_id else b for b in library.bookmarks]
            self._commit(user_id, library.folders, bookmarks)
        return updated

    def remove_bookmark(self, user_id, bookmark_id):
        if not user_id:
            return False
        with self.lock:
            library = self._library(user_id)
            bookmarks = [b for b in library.bookmarks if b.id != bookmark_id]
            if len(bookmarks) == len(library.bookmarks):
                return False
            self._commit(user_id, library.folders, bookmarks)
        return True

    def get_user_bookmarks(self, user_id):
        if not user_id:
            return []
        with self.lock:
            return list(self._library(user_id).bookmarks)

    def get_bookmarks_by_folder(self, user_id, folder_id):
        return [b for b in self.get_user_bookmarks(user_id) if b.folder_id == folder_id]

    def get_bookmark_by_recipe_id(self, user_id, recipe_id):
        if not user_id:
            return None
        with self.lock:
            return self._library(user_id).by_recipe.get(recipe_id)
