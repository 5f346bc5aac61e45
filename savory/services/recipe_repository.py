# savory/services/recipe_repository.py
import logging
import random
import threading
from collections import defaultdict
from datetime import datetime, timezone

from savory.errors import PersistenceError, StorageError
from savory.models.recipe import Recipe
from savory.utils.seed import load_seed_records, seed_path
from savory.utils.text_processing import (
    duration_minutes, minutes_to_duration, split_keywords, split_lines
)

logger = logging.getLogger(__name__)

COOK_TIME_BUCKETS = {
    'quick': lambda minutes: minutes < 30,
    'medium': lambda minutes: 30 <= minutes <= 60,
    'long': lambda minutes: minutes > 60,
}


class RecipeRepository:
    """In-memory recipe collection mirrored into the `recipes` document.

    Collection order is insertion order with created recipes prepended, so
    the head of the list is the most recent recipe.
    """

    DOCUMENT_KEY = 'recipes'

    def __init__(self, store, seed_dir=None):
        self.store = store
        self.seed_dir = seed_dir
        self.lock = threading.RLock()
        self._recipes = []

    def load(self):
        """Read the stored collection, falling back to the bundled seed."""
        records = None
        try:
            records = self.store.load(self.DOCUMENT_KEY)
        except StorageError as e:
            logger.error("Invalid stored recipes, using seed data: %s", e)

        if not isinstance(records, list) or not records:
            records = load_seed_records(seed_path(self.seed_dir, 'recipes'))

        recipes = self.ingest(records)
        with self.lock:
            self._recipes = recipes
        try:
            self.store.save(self.DOCUMENT_KEY, [recipe.to_dict() for recipe in recipes])
        except PersistenceError as e:
            logger.error("Could not write back ingested recipes: %s", e)

        logger.info("Successfully loaded %d recipes", len(recipes))
        return len(recipes)

    @staticmethod
    def ingest(records):
        """Convert raw records to Recipe objects, skipping anything that is not a record."""
        return [Recipe.from_dict(record) for record in records or [] if isinstance(record, dict)]

    def all(self):
        with self.lock:
            return list(self._recipes)

    def count(self):
        with self.lock:
            return len(self._recipes)

    def get_by_id(self, recipe_id):
        with self.lock:
            for recipe in self._recipes:
                if recipe.recipe_id == recipe_id:
                    return recipe
        return None

    def get_random(self, count=None):
        recipes = self.all()
        if count is None or count > len(recipes):
            count = len(recipes)
        return random.sample(recipes, max(count, 0))

    def get_top_rated(self, count):
        rated = [recipe for recipe in self.all() if recipe.aggregated_rating > 0]
        rated.sort(key=lambda recipe: recipe.aggregated_rating, reverse=True)
        return rated[:count]

    def get_recent(self, count):
        return self.all()[:count]

    def get_trending(self, count):
        return sorted(self.all(), key=lambda recipe: recipe.review_count, reverse=True)[:count]

    def get_by_category(self, category, count=0):
        matches = self.filter_by_categories(self.all(), [category])
        return matches[:count] if count else matches

    def get_by_author(self, author_id):
        return [recipe for recipe in self.all() if recipe.author_id == str(author_id)]

    def get_related(self, recipe_id, count=6):
        """Same-category recipes from a random draw, topped up with top-rated ones."""
        recipe = self.get_by_id(recipe_id)
        if not recipe:
            return []

        related = []
        if recipe.category:
            related = [
                r for r in self.get_random(30)
                if r.recipe_id != recipe_id and r.category == recipe.category
            ][:count]

        if len(related) < count:
            seen = {r.recipe_id for r in related}
            backfill = [
                r for r in self.get_top_rated(20)
                if r.recipe_id != recipe_id and r.recipe_id not in seen
            ]
            related.extend(backfill[:count - len(related)])

        return related

    @staticmethod
    def filter_by_categories(recipes, categories):
        wanted = [c.lower() for c in categories if c]
        if not wanted:
            return list(recipes)

        def matches(recipe):
            category = (recipe.category or '').lower()
            if any(c in category for c in wanted):
                return True
            return any(
                isinstance(keyword, str) and c in keyword.lower()
                for keyword in recipe.keywords
                for c in wanted
            )

        return [recipe for recipe in recipes if matches(recipe)]

    @staticmethod
    def filter_by_cook_time(recipes, buckets):
        checks = [COOK_TIME_BUCKETS[b] for b in buckets if b in COOK_TIME_BUCKETS]
        if not checks:
            return list(recipes)
        return [
            recipe for recipe in recipes
            if any(check(duration_minutes(recipe.total_time)) for check in checks)
        ]

    def create(self, data):
        """
        Create a recipe from form data and prepend it to the collection.

        Args:
            data (dict): name, description, instructions (newline separated),
                category, author_id, author_name, prep_time and cook_time in
                minutes, servings, and optionally keywords (comma separated),
                image_url, recipe_yield, ingredient_quantities, ingredient_parts.

        Returns:
            Recipe: the stored recipe.

        Raises:
            PersistenceError: the collection could not be written; nothing changed.
        """
        prep_time = int(data.get('prep_time') or 0)
        cook_time = int(data.get('cook_time') or 0)

        with self.lock:
            new_id = max((recipe.recipe_id for recipe in self._recipes), default=0)
            new_id = max(new_id, 0) + 1

            recipe = Recipe(
                recipe_id=new_id,
                name=data.get('name', ''),
                description=data.get('description', ''),
                author_id=str(data.get('author_id', '')),
                author_name=data.get('author_name', ''),
                category=data.get('category', ''),
                keywords=split_keywords(data.get('keywords')),
                ingredient_quantities=list(data.get('ingredient_quantities') or []),
                ingredient_parts=list(data.get('ingredient_parts') or []),
                instructions=split_lines(data.get('instructions')),
                images=[data['image_url']] if data.get('image_url') else [],
                servings=int(data.get('servings') or 0),
                recipe_yield=data.get('recipe_yield') or '',
                prep_time=minutes_to_duration(prep_time),
                cook_time=minutes_to_duration(cook_time),
                total_time=minutes_to_duration(prep_time + cook_time),
                date_published=datetime.now(timezone.utc).isoformat(),
            )

            updated = [recipe] + self._recipes
            self.store.save(self.DOCUMENT_KEY, [r.to_dict() for r in updated])
            self._recipes = updated

        logger.info("Created recipe %d (%s)", recipe.recipe_id, recipe.name)
        return recipe

    def recompute_aggregates(self, reviews, recipe_id=None):
        """
        Derive AggregatedRating / ReviewCount from `reviews`.

        ReviewCount becomes the number of matching reviews. AggregatedRating
        becomes their mean, or keeps its previous value when there are none.
        With `recipe_id` only that recipe is touched.
        """
        totals = defaultdict(lambda: [0, 0])
        for review in reviews:
            if recipe_id is None or review.recipe_id == recipe_id:
                totals[review.recipe_id][0] += review.rating
                totals[review.recipe_id][1] += 1

        with self.lock:
            updated = []
            for recipe in self._recipes:
                if recipe_id is not None and recipe.recipe_id != recipe_id:
                    updated.append(recipe)
                    continue
                rating_sum, review_count = totals.get(recipe.recipe_id, (0, 0))
                rating = rating_sum / review_count if review_count else recipe.aggregated_rating
                updated.append(recipe.with_aggregates(rating, review_count))
            self._recipes = updated
