# savory/models/bookmark.py
from dataclasses import dataclass

from savory.utils.text_processing import to_number


@dataclass
class Bookmark:
    id: str
    recipe_id: int
    user_id: str
    folder_id: str
    rating: int
    created_at: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data['id']),
            recipe_id=to_number(data.get('recipeId'), cast=int),
            user_id=str(data.get('userId', '')),
            folder_id=str(data.get('folderId', '')),
            rating=to_number(data.get('rating'), cast=int),
            created_at=data.get('createdAt', '')
        )

    def to_dict(self):
        return {
            'id': self.id,
            'recipeId': self.recipe_id,
            'userId': self.user_id,
            'folderId': self.folder_id,
            'rating': self.rating,
            'createdAt': self.created_at,
        }
