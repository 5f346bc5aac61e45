import logging
import threading
import time
from datetime import datetime, timezone

from savory.errors import StorageError
from savory.models.review import Review
from savory.utils.seed import load_seed_records, seed_path

logger = logging.getLogger(__name__)


class ReviewLedger:
    """Append-only reviews, most recent first, kept in the `reviews` document.

    Every insert recomputes the reviewed recipe's aggregate rating and count
    on the repository while both locks are held.
    """

    DOCUMENT_KEY = 'reviews'

    def __init__(self, store, repository, seed_dir=None):
        self.store = store
        self.repository = repository
        self.seed_dir = seed_dir
        self.lock = threading.RLock()
        self._reviews = []
        self._last_review_id = 0

    def load(self):
        records = None
        try:
            records = self.store.load(self.DOCUMENT_KEY)
        except StorageError as e:
            logger.error("Invalid stored reviews, using seed data: %s", e)

        if not isinstance(records, list):
            records = load_seed_records(seed_path(self.seed_dir, 'reviews'))

        reviews = [Review.from_dict(r) for r in records if isinstance(r, dict)]
        with self.lock:
            self._reviews = reviews
            self._last_review_id = max((r.review_id for r in reviews), default=0)
            if reviews:
                self.repository.recompute_aggregates(reviews)
            else:
                logger.warning("No reviews found or invalid review data format.")

        logger.info("Successfully loaded %d reviews", len(reviews))
        return len(reviews)

    def _next_review_id(self):
        review_id = max(int(time.time() * 1000), self._last_review_id + 1)
        self._last_review_id = review_id
        return review_id

    def add_review(self, data):
        """
        Store a review and refresh the recipe's aggregates.

        Args:
            data (dict): recipe_id, author_id, author_name, rating (1-5) and
                review text under `review`.

        Returns:
            Review: the stored review.

        Raises:
            ValueError: rating is not an integer between 1 and 5, or the recipe
                does not exist.
            PersistenceError: the reviews document could not be written.
        """
        rating = data.get('rating')
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValueError("Rating must be an integer between 1 and 5")
        if self.repository.get_by_id(int(data['recipe_id'])) is None:
            raise ValueError(f"Unknown recipe {data['recipe_id']}")

        now = datetime.now(timezone.utc).isoformat()
        with self.lock, self.repository.lock:
            review = Review(
                review_id=self._next_review_id(),
                recipe_id=int(data['recipe_id']),
                author_id=str(data.get('author_id', '')),
                author_name=data.get('author_name', ''),
                rating=rating,
                review_text=data.get('review', ''),
                date_submitted=now,
                date_modified=now
            )
            updated = [review] + self._reviews
            self.store.save(self.DOCUMENT_KEY, [r.to_dict() for r in updated])
            self._reviews = updated
            self.repository.recompute_aggregates(updated, recipe_id=review.recipe_id)

        logger.info("Added review %d for recipe %d", review.review_id, review.recipe_id)
        return review

    def all(self):
        with self.lock:
            return list(self._reviews)

    def get_for_recipe(self, recipe_id):
        return [r for r in self.all() if r.recipe_id == recipe_id]

    def get_by_author(self, author_id):
        return [r for r in self.all() if r.author_id == str(author_id)]
