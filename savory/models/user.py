from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash


@dataclass
class User:
    """User record backing the identity collaborator; the id is opaque to the rest of the app"""
    id: str
    username: str
    email: str
    name: str = ""
    password_hash: str = ""
    avatar: str = ""

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return bool(self.password_hash) and check_password_hash(self.password_hash, password)

    @classmethod
    def from_dict(cls, data):
        user = cls(
            id=str(data['id']),
            username=data.get('username', ''),
            email=data.get('email', ''),
            name=data.get('name', ''),
            password_hash=data.get('password_hash', ''),
            avatar=data.get('avatar', '')
        )
        # bundled seed users carry a plain password
        if not user.password_hash and data.get('password'):
            user.set_password(data['password'])
        return user

    def to_record(self):
        return dict(self.to_dict(), password_hash=self.password_hash)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'name': self.name,
            'avatar': self.avatar,
        }
