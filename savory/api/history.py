from flask import current_app, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from . import history_bp


def _with_personal_rating(recipe, bookmark):
    data = recipe.to_dict()
    data['personalRating'] = bookmark.rating if bookmark else None
    return data


@history_bp.route('', methods=['GET'])
@jwt_required()
def get_history():
    """Viewed, created and bookmarked recipes plus the user's reviews"""
    user_id = get_jwt_identity()
    repository = current_app.recipe_repository
    bookmarks = current_app.bookmark_store

    def serialize(recipes):
        return [
            _with_personal_rating(recipe, bookmarks.get_bookmark_by_recipe_id(user_id, recipe.recipe_id))
            for recipe in recipes
        ]

    viewed = [repository.get_by_id(rid) for rid in current_app.view_history.get_viewed(user_id)]
    bookmarked = [repository.get_by_id(b.recipe_id) for b in bookmarks.get_user_bookmarks(user_id)]
    reviews = current_app.review_ledger.get_by_author(user_id)

    return jsonify({
        'viewed': serialize([r for r in viewed if r]),
        'created': serialize(repository.get_by_author(user_id)),
        'bookmarked': serialize([r for r in bookmarked if r]),
        'reviews': [review.to_dict() for review in reviews],
    }), 200
