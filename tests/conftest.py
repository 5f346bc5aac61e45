import json

import pytest
from flask_jwt_extended import create_access_token

from savory import create_app
from savory.services import BookmarkStore, RecipeRepository, ReviewLedger, SearchService
from savory.utils.storage import MemoryStore

JWT_TEST_KEY = 'savory-test-jwt-secret-key-0123456789abcdef'

SEED_RECIPES = [
    {
        'RecipeId': 1,
        'Name': 'Chocolate Cake',
        'Description': 'Rich dessert for birthdays!',
        'AuthorId': 'author_1',
        'AuthorName': 'Joey',
        'RecipeCategory': 'Dessert',
        'Keywords': ['Sweet', 'Baking'],
        'RecipeIngredientQuantities': ['2', '3/4', '2'],
        'RecipeIngredientParts': ['flour', 'cocoa powder', 'sugar'],
        'RecipeInstructions': ['Mix', 'Bake'],
        'Images': ['https://example.com/cake.jpg'],
        'AggregatedRating': 4.0,
        'ReviewCount': 3,
        'PrepTime': 'PT15M',
        'CookTime': 'PT35M',
        'TotalTime': 'PT50M',
        'RecipeServings': 12,
    },
    {
        'RecipeId': 2,
        'Name': 'Garden Salad',
        'Description': 'Crisp and fresh',
        'RecipeCategory': 'Salad',
        'Keywords': ['Vegetable', 'Quick'],
        'RecipeIngredientParts': ['lettuce', 'tomato', 'cucumber'],
        'AggregatedRating': 0,
        'ReviewCount': 0,
        'TotalTime': 'PT10M',
    },
    {
        'RecipeId': 7,
        'Name': 'Beef Stew',
        'Description': 'Slow cooked winter classic',
        'RecipeCategory': 'Stew',
        'Keywords': ['Winter'],
        'RecipeIngredientParts': ['beef', 'potatoes', 'carrots'],
        'AggregatedRating': 3.5,
        'ReviewCount': 8,
        'TotalTime': 'PT2H',
    },
    {
        'RecipeId': 4,
        'Name': 'Lemon Tart',
        'Description': 'Bright and tangy',
        'RecipeCategory': 'Dessert',
        'Keywords': 'Sweet;Citrus',
        'RecipeIngredientParts': ['lemon', 'butter', 'sugar'],
        'AggregatedRating': 5.0,
        'ReviewCount': 1,
        'TotalTime': 'PT45M',
    },
]

SEED_REVIEWS = [
    {'ReviewId': 11, 'RecipeId': 7, 'AuthorId': 'author_2', 'AuthorName': 'Ann',
     'Rating': 4, 'Review': 'Hearty', 'DateSubmitted': '2020-01-02T00:00:00Z',
     'DateModified': '2020-01-02T00:00:00Z'},
    {'ReviewId': 10, 'RecipeId': 7, 'AuthorId': 'author_3', 'AuthorName': 'Bob',
     'Rating': 2, 'Review': 'Too salty', 'DateSubmitted': '2020-01-01T00:00:00Z',
     'DateModified': '2020-01-01T00:00:00Z'},
]

SEED_USERS = [
    {'id': 'user_demo', 'username': 'demo', 'email': 'demo@savory.app',
     'name': 'Demo Cook', 'password': 'savory123'},
]


class FlakyStore(MemoryStore):
    """MemoryStore whose writes fail while `fail` is set."""

    def __init__(self, documents=None):
        super().__init__(documents)
        self.fail = False

    def _write(self, key, body):
        if self.fail:
            raise OSError("disk full")
        super()._write(key, body)


@pytest.fixture
def seed_dir(tmp_path):
    directory = tmp_path / 'seed'
    directory.mkdir()
    (directory / 'recipes.json').write_text(json.dumps(SEED_RECIPES), encoding='utf-8')
    (directory / 'reviews.json').write_text(json.dumps(SEED_REVIEWS), encoding='utf-8')
    (directory / 'users.json').write_text(json.dumps(SEED_USERS), encoding='utf-8')
    return str(directory)


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def repository(store, seed_dir):
    repository = RecipeRepository(store, seed_dir)
    repository.load()
    return repository


@pytest.fixture
def ledger(store, repository, seed_dir):
    ledger = ReviewLedger(store, repository, seed_dir)
    ledger.load()
    return ledger


@pytest.fixture
def search_service(repository):
    return SearchService(repository)


@pytest.fixture
def bookmark_store(store):
    return BookmarkStore(store)


@pytest.fixture
def app(store, seed_dir):
    app = create_app({
        'TESTING': True,
        'STORAGE_BACKEND': 'memory',
        'DOCUMENT_STORE': store,
        'SEED_DATA_DIR': seed_dir,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'JWT_SECRET_KEY': JWT_TEST_KEY,
        'CACHE_TYPE': 'SimpleCache',
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def make_headers(app, user_id, name='Tester'):
    with app.app_context():
        token = create_access_token(identity=user_id, additional_claims={'name': name})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers(app):
    return make_headers(app, 'user_1')


@pytest.fixture
def sql_app(seed_dir):
    return create_app({
        'TESTING': True,
        'STORAGE_BACKEND': 'sql',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SEED_DATA_DIR': seed_dir,
        'JWT_SECRET_KEY': JWT_TEST_KEY,
    })
