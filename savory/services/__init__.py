from .auth_service import AuthService
from .bookmark_service import BookmarkStore
from .history_service import ViewHistory
from .recipe_repository import RecipeRepository
from .review_service import ReviewLedger
from .search_service import SearchService

__all__ = ['AuthService', 'BookmarkStore', 'RecipeRepository', 'ReviewLedger', 'SearchService', 'ViewHistory']
