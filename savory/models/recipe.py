# savory/models/recipe.py
from dataclasses import dataclass, field, replace
from typing import List

from savory.utils.text_processing import parse_delimited_field, sanitize_text, to_number

NUTRITION_FIELDS = (
    ('calories', 'Calories'),
    ('fat_content', 'FatContent'),
    ('saturated_fat_content', 'SaturatedFatContent'),
    ('cholesterol_content', 'CholesterolContent'),
    ('sodium_content', 'SodiumContent'),
    ('carbohydrate_content', 'CarbohydrateContent'),
    ('fiber_content', 'FiberContent'),
    ('sugar_content', 'SugarContent'),
    ('protein_content', 'ProteinContent'),
)


@dataclass
class Recipe:
    """A recipe as held by the repository.

    Serialized with the dataset's column names (RecipeId, Name, ...) so
    stored documents and seed files share one format.
    """
    recipe_id: int
    name: str
    description: str = ""
    author_id: str = ""
    author_name: str = ""
    category: str = ""
    keywords: List[str] = field(default_factory=list)
    ingredient_quantities: List[str] = field(default_factory=list)
    ingredient_parts: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    aggregated_rating: float = 0.0
    review_count: int = 0
    calories: float = 0.0
    fat_content: float = 0.0
    saturated_fat_content: float = 0.0
    cholesterol_content: float = 0.0
    sodium_content: float = 0.0
    carbohydrate_content: float = 0.0
    fiber_content: float = 0.0
    sugar_content: float = 0.0
    protein_content: float = 0.0
    servings: int = 0
    recipe_yield: str = ""
    prep_time: str = ""
    cook_time: str = ""
    total_time: str = ""
    date_published: str = ""

    @property
    def image_url(self):
        return self.images[0] if self.images else None

    def with_aggregates(self, aggregated_rating, review_count):
        return replace(self, aggregated_rating=aggregated_rating, review_count=review_count)

    @classmethod
    def from_dict(cls, data):
        """Ingest a raw record: sanitize text, parse list fields, coerce numbers."""
        nutrition = {attr: to_number(data.get(key)) for attr, key in NUTRITION_FIELDS}
        return cls(
            recipe_id=to_number(data.get('RecipeId'), cast=int),
            name=sanitize_text(str(data.get('Name') or '')),
            description=sanitize_text(str(data['Description'])) if data.get('Description') else '',
            author_id=_text(data.get('AuthorId')),
            author_name=_text(data.get('AuthorName')),
            category=_text(data.get('RecipeCategory')),
            keywords=parse_delimited_field(data.get('Keywords')),
            ingredient_quantities=parse_delimited_field(data.get('RecipeIngredientQuantities')),
            ingredient_parts=parse_delimited_field(data.get('RecipeIngredientParts')),
            instructions=parse_delimited_field(data.get('RecipeInstructions')),
            images=parse_delimited_field(data.get('Images')),
            aggregated_rating=to_number(data.get('AggregatedRating')),
            review_count=to_number(data.get('ReviewCount'), cast=int),
            servings=to_number(data.get('RecipeServings'), cast=int),
            recipe_yield=_text(data.get('RecipeYield')),
            prep_time=_text(data.get('PrepTime')),
            cook_time=_text(data.get('CookTime')),
            total_time=_text(data.get('TotalTime')),
            date_published=_text(data.get('DatePublished')),
            **nutrition
        )

    def to_dict(self):
        data = {
            'RecipeId': self.recipe_id,
            'Name': self.name,
            'AuthorId': self.author_id,
            'AuthorName': self.author_name,
            'CookTime': self.cook_time,
            'PrepTime': self.prep_time,
            'TotalTime': self.total_time,
            'DatePublished': self.date_published,
            'Description': self.description,
            'Images': list(self.images),
            'RecipeCategory': self.category,
            'Keywords': list(self.keywords),
            'RecipeIngredientQuantities': list(self.ingredient_quantities),
            'RecipeIngredientParts': list(self.ingredient_parts),
            'AggregatedRating': self.aggregated_rating,
            'ReviewCount': self.review_count,
            'RecipeServings': self.servings,
            'RecipeYield': self.recipe_yield,
            'RecipeInstructions': list(self.instructions),
        }
        for attr, key in NUTRITION_FIELDS:
            data[key] = getattr(self, attr)
        return data


def _text(value):
    if value is None:
        return ""
    return str(value)
