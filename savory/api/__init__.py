from flask import Blueprint

auth_bp = Blueprint('auth', __name__)
search_bp = Blueprint('search', __name__)
recipe_bp = Blueprint('recipe', __name__)
folder_bp = Blueprint('folder', __name__)
bookmark_bp = Blueprint('bookmark', __name__)
history_bp = Blueprint('history', __name__)

# Import routes to register them with the blueprints
from . import auth
from . import search
from . import recipe
from . import folder
from . import bookmark
from . import history
