from flask import current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from . import bookmark_bp


def _valid_rating(rating):
    return isinstance(rating, int) and not isinstance(rating, bool) and rating in range(1, 6)


@bookmark_bp.route('', methods=['POST'])
@jwt_required()
def create_bookmark():
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}
    recipe_id = data.get('recipe_id')
    folder_id = data.get('folder_id')
    user_rating = data.get('rating')

    if not isinstance(recipe_id, int) or not folder_id or not _valid_rating(user_rating):
        return jsonify({'error': 'Missing or invalid data'}), 400

    store = current_app.bookmark_store
    if not current_app.recipe_repository.get_by_id(recipe_id):
        return jsonify({'error': 'Recipe not found'}), 404
    if not store.get_folder_by_id(user_id, folder_id):
        return jsonify({'error': 'Folder not found'}), 404

    # An existing bookmark for the recipe is moved instead of duplicated
    existing_bookmark = store.get_bookmark_by_recipe_id(user_id, recipe_id)
    bookmark = store.add_bookmark(user_id, recipe_id, folder_id, user_rating)

    if existing_bookmark:
        return jsonify({'message': 'Recipe moved to different folder', 'bookmark': bookmark.to_dict()}), 200
    return jsonify({'message': 'Bookmark created', 'bookmark': bookmark.to_dict()}), 201


@bookmark_bp.route('/recipe/<int:recipe_id>', methods=['GET'])
@jwt_required()
def get_bookmark_for_recipe(recipe_id):
    user_id = get_jwt_identity()
    bookmark = current_app.bookmark_store.get_bookmark_by_recipe_id(user_id, recipe_id)
    if not bookmark:
        return jsonify({'message': 'Bookmark not found'}), 404
    return jsonify(bookmark.to_dict()), 200


@bookmark_bp.route('/<string:bookmark_id>', methods=['PUT'])
@jwt_required()
def update_bookmark(bookmark_id):
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}
    folder_id = data.get('folder_id')
    new_rating = data.get('rating')

    if new_rating is not None and not _valid_rating(new_rating):
        return jsonify({'message': 'Invalid rating, must be between 1 and 5'}), 400

    store = current_app.bookmark_store
    if folder_id is not None and not store.get_folder_by_id(user_id, folder_id):
        return jsonify({'message': 'Folder not found'}), 404

    bookmark = store.update_bookmark(user_id, bookmark_id, folder_id=folder_id, rating=new_rating)
    if not bookmark:
        return jsonify({'message': 'Bookmark not found'}), 404
    return jsonify({'message': 'Bookmark updated successfully', 'bookmark': bookmark.to_dict()}), 200


@bookmark_bp.route('/<string:bookmark_id>', methods=['DELETE'])
@jwt_required()
def remove_bookmark(bookmark_id):
    user_id = get_jwt_identity()
    if not current_app.bookmark_store.remove_bookmark(user_id, bookmark_id):
        return jsonify({'message': 'Bookmark not found'}), 404
    return jsonify({'message': 'Bookmark removed successfully'}), 200
