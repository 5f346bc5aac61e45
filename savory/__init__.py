import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from savory.extensions import cache, db, jwt, migrate
from .api import auth_bp, bookmark_bp, folder_bp, history_bp, recipe_bp, search_bp
from .errors import PersistenceError
from .services import AuthService, BookmarkStore, RecipeRepository, ReviewLedger, SearchService, ViewHistory
from .utils.seed import DEFAULT_SEED_DIR
from .utils.storage import build_store

load_dotenv()


def create_app(test_config=None):
    app = Flask(__name__)

    app.config.update(
        SECRET_KEY=os.getenv('SECRET_KEY', 'dev'),
        SQLALCHEMY_DATABASE_URI=os.getenv('DATABASE_URL', 'sqlite:///savory.db'),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        JWT_SECRET_KEY=os.getenv('JWT_SECRET_KEY', 'dev-jwt'),
        JWT_TOKEN_LOCATION=["headers"],
        JWT_HEADER_NAME="Authorization",
        JWT_HEADER_TYPE="Bearer",
        CACHE_TYPE=os.getenv('CACHE_TYPE', 'SimpleCache'),
        CACHE_DEFAULT_TIMEOUT=300,
        STORAGE_BACKEND=os.getenv('STORAGE_BACKEND', 'sql'),
        STORAGE_DIR=os.getenv('STORAGE_DIR', os.path.join(app.instance_path, 'storage')),
        SEED_DATA_DIR=os.getenv('SEED_DATA_DIR', DEFAULT_SEED_DIR),
        CORS_ORIGINS=os.getenv('CORS_ORIGINS', 'http://localhost:3000'),
    )
    if test_config:
        app.config.update(test_config)
    app.logger.info("Config loaded (storage backend: %s)", app.config['STORAGE_BACKEND'])

    CORS(app, supports_credentials=True, resources={
        r"/api/*": {"origins": app.config['CORS_ORIGINS'].split(','),
                    "allow_headers": ["Authorization", "Content-Type"]},
    })

    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)

    with app.app_context():
        if app.config['STORAGE_BACKEND'] == 'sql':
            from . import models  # noqa: F401  registers the documents table
            db.create_all()

        store = app.config.get('DOCUMENT_STORE') or build_store(app.config, db)
        seed_dir = app.config['SEED_DATA_DIR']

        app.document_store = store
        app.recipe_repository = RecipeRepository(store, seed_dir)
        app.recipe_repository.load()
        app.review_ledger = ReviewLedger(store, app.recipe_repository, seed_dir)
        app.review_ledger.load()
        app.search_service = SearchService(app.recipe_repository)
        app.bookmark_store = BookmarkStore(store)
        app.view_history = ViewHistory(store)
        app.auth_service = AuthService(store, seed_dir)
        users = app.auth_service.load()
        app.logger.info("Loaded %d recipes and %d users",
                        app.recipe_repository.count(), users)

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(error):
        app.logger.error("Persistence failure: %s", error)
        return jsonify({'error': 'Could not save your changes, please try again.'}), 503

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(search_bp, url_prefix='/api')
    app.register_blueprint(recipe_bp, url_prefix='/api')
    app.register_blueprint(folder_bp, url_prefix='/api/folder')
    app.register_blueprint(bookmark_bp, url_prefix='/api/bookmark')
    app.register_blueprint(history_bp, url_prefix='/api/history')

    return app
