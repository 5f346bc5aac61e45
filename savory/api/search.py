from flask import current_app, jsonify, request

from . import search_bp


@search_bp.route('/search', methods=['GET'], strict_slashes=False)
def search_recipes():
    query = request.args.get('q', '').strip()
    categories = request.args.getlist('category')
    times = request.args.getlist('time')

    results = current_app.search_service.search_with_filters(query, categories, times)
    suggestions = current_app.search_service.suggest_similar_terms(query) if query else []
    if suggestions:
        current_app.logger.info("Search term suggestions for %r: %s", query, suggestions)

    # Pagination parameters, per_page=0 returns everything
    page = max(request.args.get('page', 1, type=int), 1)
    per_page = max(request.args.get('per_page', 0, type=int), 0)
    total_results = len(results)
    if per_page:
        offset = (page - 1) * per_page
        results = results[offset:offset + per_page]

    response = {
        'results': [recipe.to_dict() for recipe in results],
        'total': total_results,
        'page': page,
        'per_page': per_page,
        'query': query,
        'suggestions': suggestions,
    }
    return jsonify(response), 200


@search_bp.route('/search/suggestions', methods=['GET'])
def search_suggestions():
    query = request.args.get('q', '').strip()
    if not query:
        return jsonify({'error': 'Missing search query'}), 400

    return jsonify({
        'query': query,
        'suggestions': current_app.search_service.suggest_similar_terms(query)
    }), 200
