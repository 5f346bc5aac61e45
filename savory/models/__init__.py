# savory/models/__init__.py
from .bookmark import Bookmark
from .document import StoredDocument
from .folder import Folder
from .recipe import Recipe
from .review import Review
from .user import User

__all__ = [
    'Bookmark', 'Folder', 'Recipe', 'Review', 'StoredDocument', 'User'
]
