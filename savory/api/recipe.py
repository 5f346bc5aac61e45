from flask import current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, jwt_required

from savory.errors import PersistenceError
from savory.extensions import cache

from . import recipe_bp

DEFAULT_LIST_SIZE = 6


def _list_response(recipes):
    return jsonify({'results': [recipe.to_dict() for recipe in recipes], 'total': len(recipes)}), 200


def _count():
    return max(request.args.get('count', DEFAULT_LIST_SIZE, type=int), 0)


@recipe_bp.route('/recipes/random', methods=['GET'])
def random_recipes():
    return _list_response(current_app.recipe_repository.get_random(_count()))


@recipe_bp.route('/recipes/top-rated', methods=['GET'])
@cache.cached(query_string=True)
def top_rated_recipes():
    return _list_response(current_app.recipe_repository.get_top_rated(_count()))


@recipe_bp.route('/recipes/recent', methods=['GET'])
@cache.cached(query_string=True)
def recent_recipes():
    return _list_response(current_app.recipe_repository.get_recent(_count()))


@recipe_bp.route('/recipes/trending', methods=['GET'])
@cache.cached(query_string=True)
def trending_recipes():
    return _list_response(current_app.recipe_repository.get_trending(_count()))


@recipe_bp.route('/recipes/category/<string:category>', methods=['GET'])
@cache.cached(query_string=True)
def category_recipes(category):
    count = max(request.args.get('count', 0, type=int), 0)
    return _list_response(current_app.recipe_repository.get_by_category(category, count))


@recipe_bp.route('/recipes', methods=['POST'])
@jwt_required()
def create_recipe():
    data = request.get_json(silent=True) or {}

    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Recipe name is required'}), 400

    instructions = data.get('instructions') or ''
    if isinstance(instructions, list):
        instructions = '\n'.join(str(step) for step in instructions)

    ingredients = [
        i for i in data.get('ingredients') or []
        if isinstance(i, dict) and str(i.get('part') or '').strip()
    ]
    if not ingredients or not instructions.strip():
        return jsonify({'error': 'Please add at least one ingredient and one instruction.'}), 400

    try:
        prep_time = int(data.get('prep_time') or 0)
        cook_time = int(data.get('cook_time') or 0)
        servings = int(data.get('servings') or 0)
    except (TypeError, ValueError):
        return jsonify({'error': 'prep_time, cook_time and servings must be whole numbers'}), 400

    recipe = current_app.recipe_repository.create({
        'name': name,
        'description': data.get('description', ''),
        'instructions': instructions,
        'category': data.get('category', ''),
        'author_id': get_jwt_identity(),
        'author_name': get_jwt().get('name', ''),
        'prep_time': prep_time,
        'cook_time': cook_time,
        'servings': servings,
        'keywords': data.get('keywords', ''),
        'image_url': data.get('image_url'),
        'recipe_yield': data.get('recipe_yield', ''),
        'ingredient_quantities': [str(i.get('quantity') or '').strip() for i in ingredients],
        'ingredient_parts': [str(i['part']).strip() for i in ingredients],
    })
    cache.clear()
    return jsonify({'newId': recipe.recipe_id, 'recipe': recipe.to_dict()}), 201


@recipe_bp.route('/recipe/<int:recipe_id>', methods=['GET'], strict_slashes=False)
@jwt_required(optional=True)
def get_recipe(recipe_id):
    recipe = current_app.recipe_repository.get_by_id(recipe_id)
    if not recipe:
        return jsonify({'error': 'Recipe not found'}), 404

    user_id = get_jwt_identity()
    data = recipe.to_dict()
    if user_id:
        try:
            current_app.view_history.record_view(user_id, recipe_id)
        except PersistenceError as e:
            current_app.logger.warning("Could not record view of %d: %s", recipe_id, e)
        bookmark = current_app.bookmark_store.get_bookmark_by_recipe_id(user_id, recipe_id)
        data['bookmark'] = bookmark.to_dict() if bookmark else None
    return jsonify(data), 200


@recipe_bp.route('/recipe/<int:recipe_id>/related', methods=['GET'])
def related_recipes(recipe_id):
    if not current_app.recipe_repository.get_by_id(recipe_id):
        return jsonify({'error': 'Recipe not found'}), 404
    return _list_response(current_app.recipe_repository.get_related(recipe_id, _count()))


@recipe_bp.route('/recipe/<int:recipe_id>/reviews', methods=['GET'])
def get_reviews(recipe_id):
    reviews = current_app.review_ledger.get_for_recipe(recipe_id)
    return jsonify({'results': [review.to_dict() for review in reviews], 'total': len(reviews)}), 200


@recipe_bp.route('/recipe/<int:recipe_id>/reviews', methods=['POST'])
@jwt_required()
def add_review(recipe_id):
    if not current_app.recipe_repository.get_by_id(recipe_id):
        return jsonify({'error': 'Recipe not found'}), 404

    data = request.get_json(silent=True) or {}
    rating = data.get('rating')
    text = (data.get('review') or '').strip()

    if not isinstance(rating, int) or isinstance(rating, bool) or rating not in range(1, 6):
        return jsonify({'error': 'Invalid rating, must be between 1 and 5'}), 400
    if not text:
        return jsonify({'error': 'Please provide a review.'}), 400

    review = current_app.review_ledger.add_review({
        'recipe_id': recipe_id,
        'author_id': get_jwt_identity(),
        'author_name': get_jwt().get('name', ''),
        'rating': rating,
        'review': text,
    })
    cache.clear()
    recipe = current_app.recipe_repository.get_by_id(recipe_id)
    return jsonify({'review': review.to_dict(), 'recipe': recipe.to_dict()}), 201
