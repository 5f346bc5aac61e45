from flask import current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from . import folder_bp


@folder_bp.route('', methods=['GET'])
@jwt_required()
def get_folders():
    user_id = get_jwt_identity()
    store = current_app.bookmark_store
    folders = store.get_user_folders(user_id)
    return jsonify([
        folder.to_dict(recipe_count=len(store.get_bookmarks_by_folder(user_id, folder.id)))
        for folder in folders
    ]), 200


@folder_bp.route('', methods=['POST'])
@jwt_required()
def create_folder():
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()

    if not name:
        return jsonify({'error': 'Folder name is required'}), 400

    folder = current_app.bookmark_store.create_folder(
        user_id, name, color=data.get('color'), icon=data.get('icon')
    )
    return jsonify(folder.to_dict(recipe_count=0)), 201


@folder_bp.route('/<string:folder_id>', methods=['GET'])
@jwt_required()
def get_folder(folder_id):
    user_id = get_jwt_identity()
    store = current_app.bookmark_store
    folder = store.get_folder_by_id(user_id, folder_id)
    if not folder:
        return jsonify({'error': 'Folder not found'}), 404

    bookmarks = store.get_bookmarks_by_folder(user_id, folder_id)
    recipes = []
    for b in bookmarks:
        recipe = current_app.recipe_repository.get_by_id(b.recipe_id)
        if recipe:
            recipes.append({
                'recipe_id': recipe.recipe_id,
                'name': recipe.name,
                'description': recipe.description,
                'image_url': recipe.image_url,
                'bookmark_id': b.id,
                'user_rating': b.rating
            })
        else:
            # Bookmarked recipe is no longer in the collection
            recipes.append({
                'recipe_id': b.recipe_id,
                'name': f'Recipe {b.recipe_id}',
                'description': 'Recipe not found',
                'image_url': None,
                'bookmark_id': b.id,
                'user_rating': b.rating,
            })

    return jsonify({
        'folder': folder.to_dict(recipe_count=len(bookmarks)),
        'recipes': recipes
    }), 200


@folder_bp.route('/<string:folder_id>', methods=['PUT'])
@jwt_required()
def update_folder(folder_id):
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}
    folder = current_app.bookmark_store.update_folder(
        user_id, folder_id,
        name=(data.get('name') or '').strip() or None,
        color=data.get('color'),
        icon=data.get('icon')
    )
    if not folder:
        return jsonify({'error': 'Folder not found'}), 404

    return jsonify(folder.to_dict()), 200


@folder_bp.route('/<string:folder_id>', methods=['DELETE'])
@jwt_required()
def delete_folder(folder_id):
    user_id = get_jwt_identity()
    if not current_app.bookmark_store.delete_folder(user_id, folder_id):
        return jsonify({'error': 'Folder not found'}), 404
    return jsonify({'message': 'Folder deleted successfully'}), 200
