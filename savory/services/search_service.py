import logging
import math

from savory.utils.text_similarity import edit_distance, fuzzy_match

logger = logging.getLogger(__name__)

EMPTY_QUERY_LIMIT = 20
MAX_SUGGESTIONS = 5


class SearchService:
    """Service class for handling recipe search logic"""

    def __init__(self, repository):
        self.repository = repository

    def search(self, query, recipes=None):
        """
        Search recipes with an exact pass and a fuzzy fallback.

        The exact pass keeps recipes whose name, description, any keyword or
        any ingredient contains the query (case-insensitive). Only when it
        finds nothing are the same fields checked with fuzzy_match. Results
        keep collection order.

        Args:
            query (str): The search term provided by the user.
            recipes (list): Collection to search, defaults to the repository.

        Returns:
            list: matching Recipe objects (empty on internal error).
        """
        if recipes is None:
            recipes = self.repository.all()

        query_lower = (query or '').lower().strip()
        if not query_lower:
            return recipes[:EMPTY_QUERY_LIMIT]

        try:
            exact_matches = [r for r in recipes if self._exact_match(r, query_lower)]
            if exact_matches:
                return exact_matches
            return [r for r in recipes if self._fuzzy_match(r, query_lower)]
        except Exception as e:
            logger.exception("Search error for %r: %s", query, e)
            return []

    @staticmethod
    def _exact_match(recipe, query_lower):
        if query_lower in (recipe.name or '').lower():
            return True
        if query_lower in (recipe.description or '').lower():
            return True
        if any(isinstance(k, str) and query_lower in k.lower() for k in recipe.keywords):
            return True
        return any(isinstance(i, str) and query_lower in i.lower() for i in recipe.ingredient_parts)

    @staticmethod
    def _fuzzy_match(recipe, query_lower):
        if fuzzy_match(recipe.name, query_lower):
            return True
        if recipe.description and fuzzy_match(recipe.description, query_lower):
            return True
        if any(isinstance(i, str) and fuzzy_match(i, query_lower) for i in recipe.ingredient_parts):
            return True
        return any(isinstance(k, str) and fuzzy_match(k, query_lower) for k in recipe.keywords)

    @staticmethod
    def build_vocabulary(recipes):
        """Name words and ingredient words longer than 3 chars, plus whole keywords."""
        terms = set()
        for recipe in recipes:
            terms.update(w.lower() for w in (recipe.name or '').split() if len(w) > 3)
            for ingredient in recipe.ingredient_parts:
                if isinstance(ingredient, str):
                    terms.update(w.lower() for w in ingredient.split() if len(w) > 3)
            for keyword in recipe.keywords:
                if isinstance(keyword, str):
                    terms.add(keyword.lower())
        return terms

    def suggest_similar_terms(self, query, recipes=None):
        """Closest vocabulary terms to `query` ("did you mean"), at most five."""
        if not query:
            return []
        if recipes is None:
            recipes = self.repository.all()

        query_lower = query.lower()
        scored = []
        for term in self.build_vocabulary(recipes):
            distance = edit_distance(term, query_lower)
            if distance <= min(2, math.floor(len(term) * 0.3)):
                scored.append((distance, term))

        scored.sort()
        return [term for _, term in scored[:MAX_SUGGESTIONS]]

    def search_with_filters(self, query, categories=(), times=()):
        """
        Search the way the search page does.

        With no query and no filters the whole collection comes back in random
        order. Otherwise the search result is narrowed by category and by
        cook-time bucket.
        """
        categories = [c for c in categories if c]
        times = [t for t in times if t]
        if not (query or '').strip() and not categories and not times:
            return self.repository.get_random()

        results = self.search(query)
        if categories:
            results = self.repository.filter_by_categories(results, categories)
        if times:
            results = self.repository.filter_by_cook_time(results, times)
        return results
