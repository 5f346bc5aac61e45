# savory/models/folder.py
from dataclasses import dataclass

DEFAULT_COLOR = '#ff9f7f'
DEFAULT_ICON = 'bookmark'


@dataclass
class Folder:
    id: str
    name: str
    user_id: str
    color: str = DEFAULT_COLOR
    icon: str = DEFAULT_ICON
    created_at: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            user_id=str(data.get('userId', '')),
            color=data.get('color') or DEFAULT_COLOR,
            icon=data.get('icon') or DEFAULT_ICON,
            created_at=data.get('createdAt', '')
        )

    def to_dict(self, recipe_count=None):
        data = {
            'id': self.id,
            'name': self.name,
            'userId': self.user_id,
            'color': self.color,
            'icon': self.icon,
            'createdAt': self.created_at,
        }
        if recipe_count is not None:
            data['recipeCount'] = recipe_count
        return data
