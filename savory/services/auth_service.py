import logging
import re
import threading
import uuid
from dataclasses import replace

from flask_jwt_extended import create_access_token, create_refresh_token

from savory.errors import StorageError
from savory.models.user import User
from savory.utils.seed import load_seed_records, seed_path

logger = logging.getLogger(__name__)


class AuthService:
    """Service class for handling authentication logic"""

    DOCUMENT_KEY = 'users'
    EMAIL_REGEX = r'^[\w\.-]+@[\w\.-]+\.\w+$'
    PROFILE_FIELDS = ('name', 'avatar')

    def __init__(self, store, seed_dir=None):
        self.store = store
        self.seed_dir = seed_dir
        self.lock = threading.RLock()
        self._users = []

    def load(self):
        records = None
        try:
            records = self.store.load(self.DOCUMENT_KEY)
        except StorageError as e:
            logger.error("Failed to restore users, using seed data: %s", e)

        if not isinstance(records, list):
            records = load_seed_records(seed_path(self.seed_dir, 'users'))

        with self.lock:
            self._users = [User.from_dict(r) for r in records if isinstance(r, dict) and r.get('id')]
        return len(self._users)

    @classmethod
    def validate_email(cls, email):
        """Validate email format"""
        return re.match(cls.EMAIL_REGEX, email or '') is not None

    def get_user_by_email(self, email):
        with self.lock:
            return next((u for u in self._users if u.email == email), None)

    def get_user_by_username(self, username):
        with self.lock:
            return next((u for u in self._users if u.username == username), None)

    def get_user_by_id(self, user_id):
        with self.lock:
            return next((u for u in self._users if u.id == str(user_id)), None)

    @staticmethod
    def issue_tokens(user):
        claims = {'name': user.name or user.username}
        return {
            'access_token': create_access_token(identity=user.id, additional_claims=claims),
            'refresh_token': create_refresh_token(identity=user.id, additional_claims=claims)
        }

    def register_user(self, username, email, password, name=None):
        """Register a new user"""
        if not self.validate_email(email):
            return {"success": False, "error": "Invalid email format"}, 400

        with self.lock:
            if self.get_user_by_username(username):
                return {"success": False, "error": "Username is already taken"}, 409

            if self.get_user_by_email(email):
                return {"success": False, "error": "Email is already registered"}, 409

            new_user = User(
                id=f"user_{uuid.uuid4().hex}",
                username=username,
                email=email,
                name=name or username
            )
            new_user.set_password(password)

            users = self._users + [new_user]
            self.store.save(self.DOCUMENT_KEY, [u.to_record() for u in users])
            self._users = users

        logger.info("Registered user %s", new_user.id)
        return {
            "success": True,
            "message": "User registered successfully",
            "user": new_user.to_dict(),
            **self.issue_tokens(new_user)
        }, 201

    def login_user(self, email, password):
        """Login a user"""
        user = self.get_user_by_email(email)

        if not user or not user.check_password(password):
            return {"success": False, "error": "Invalid email or password"}, 401

        return {
            "success": True,
            "message": "Login successful",
            "user": user.to_dict(),
            **self.issue_tokens(user)
        }, 200

    def update_user(self, user_id, patch):
        """Update profile fields (name, avatar) of an existing user"""
        changes = {
            field: value.strip() for field, value in (patch or {}).items()
            if field in self.PROFILE_FIELDS and isinstance(value, str)
        }
        if not changes:
            return {"success": False, "error": "Nothing to update"}, 400
        if 'name' in changes and not changes['name']:
            return {"success": False, "error": "Name cannot be empty"}, 400

        with self.lock:
            user = self.get_user_by_id(user_id)
            if not user:
                return {"success": False, "error": "User not found"}, 404

            updated = replace(user, **changes)
            users = [updated if u.id == user.id else u for u in self._users]
            self.store.save(self.DOCUMENT_KEY, [u.to_record() for u in users])
            self._users = users

        logger.info("Updated profile of %s (%s)", user_id, ', '.join(sorted(changes)))
        return {
            "success": True,
            "message": "Profile updated",
            "user": updated.to_dict(),
            **self.issue_tokens(updated)
        }, 200
