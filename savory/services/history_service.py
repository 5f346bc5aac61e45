import logging
import threading

from savory.errors import StorageError

logger = logging.getLogger(__name__)

MAX_VIEWED = 50


class ViewHistory:
    """Recently viewed recipe ids per user, most recent first."""

    def __init__(self, store):
        self.store = store
        self.lock = threading.RLock()

    @staticmethod
    def document_key(user_id):
        return f"viewed:{user_id}"

    def get_viewed(self, user_id):
        if not user_id:
            return []
        try:
            viewed = self.store.load(self.document_key(user_id))
        except StorageError as e:
            logger.error("Invalid view history for %s: %s", user_id, e)
            return []
        return [r for r in viewed if isinstance(r, int)] if isinstance(viewed, list) else []

    def record_view(self, user_id, recipe_id):
        if not user_id:
            return []
        with self.lock:
            viewed = self.get_viewed(user_id)
            updated = [recipe_id] + [r for r in viewed if r != recipe_id]
            updated = updated[:MAX_VIEWED]
            self.store.save(self.document_key(user_id), updated)
        return updated
