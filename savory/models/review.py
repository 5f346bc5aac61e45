# savory/models/review.py
from dataclasses import dataclass

from savory.utils.text_processing import to_number


@dataclass
class Review:
    review_id: int
    recipe_id: int
    author_id: str
    author_name: str
    rating: int
    review_text: str = ""
    date_submitted: str = ""
    date_modified: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(
            review_id=to_number(data.get('ReviewId'), cast=int),
            recipe_id=to_number(data.get('RecipeId'), cast=int),
            author_id=str(data.get('AuthorId') or ''),
            author_name=str(data.get('AuthorName') or ''),
            rating=to_number(data.get('Rating'), cast=int),
            review_text=str(data.get('Review') or ''),
            date_submitted=str(data.get('DateSubmitted') or ''),
            date_modified=str(data.get('DateModified') or '')
        )

    def to_dict(self):
        """Helper method to serialize Review into a dict."""
        return {
            'ReviewId': self.review_id,
            'RecipeId': self.recipe_id,
            'AuthorId': self.author_id,
            'AuthorName': self.author_name,
            'Rating': self.rating,
            'Review': self.review_text,
            'DateSubmitted': self.date_submitted,
            'DateModified': self.date_modified
        }
