from .conftest import make_headers


def result_ids(response):
    return [r['RecipeId'] for r in response.get_json()['results']]


# Auth

def test_register_and_me(client):
    response = client.post('/api/auth/register', json={
        'username': 'newcook', 'email': 'new@cook.io', 'password': 'secret1', 'name': 'New Cook'
    })
    assert response.status_code == 201
    token = response.get_json()['access_token']

    me = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert me.status_code == 200
    assert me.get_json()['user']['username'] == 'newcook'
    assert 'password_hash' not in me.get_json()['user']


def test_register_rejects_duplicates_and_bad_email(client):
    taken = client.post('/api/auth/register', json={
        'username': 'demo', 'email': 'other@cook.io', 'password': 'x'
    })
    assert taken.status_code == 409

    bad = client.post('/api/auth/register', json={
        'username': 'someone', 'email': 'not-an-email', 'password': 'x'
    })
    assert bad.status_code == 400

    missing = client.post('/api/auth/register', json={'username': 'someone'})
    assert missing.status_code == 400


def test_login(client):
    ok = client.post('/api/auth/login', json={'email': 'demo@savory.app', 'password': 'savory123'})
    assert ok.status_code == 200
    assert ok.get_json()['user']['id'] == 'user_demo'

    wrong = client.post('/api/auth/login', json={'email': 'demo@savory.app', 'password': 'nope'})
    assert wrong.status_code == 401


def test_refresh_token(client):
    tokens = client.post('/api/auth/login', json={'email': 'demo@savory.app', 'password': 'savory123'}).get_json()
    response = client.post('/api/auth/refresh', headers={'Authorization': f"Bearer {tokens['refresh_token']}"})
    assert response.status_code == 200
    assert response.get_json()['access_token']


# Search

def test_search_exact_and_fuzzy(client):
    exact = client.get('/api/search?q=chocolate')
    assert result_ids(exact) == [1]
    assert exact.get_json()['suggestions'] == ['chocolate']

    assert result_ids(client.get('/api/search?q=choclate')) == [1]


def test_search_filters_and_pagination(client):
    assert result_ids(client.get('/api/search?category=dessert')) == [1, 4]
    assert result_ids(client.get('/api/search?q=sugar&time=medium')) == [1, 4]
    assert result_ids(client.get('/api/search?q=sugar&time=quick')) == []

    page = client.get('/api/search?q=sugar&per_page=1&page=2').get_json()
    assert [r['RecipeId'] for r in page['results']] == [4]
    assert page['total'] == 2


def test_search_without_query_returns_everything(client):
    response = client.get('/api/search')
    assert sorted(result_ids(response)) == [1, 2, 4, 7]


def test_suggestions_endpoint(client):
    assert client.get('/api/search/suggestions').status_code == 400
    response = client.get('/api/search/suggestions?q=suger')
    assert response.get_json()['suggestions'] == ['sugar']


# Recipes

def test_recipe_lists(client):
    assert result_ids(client.get('/api/recipes/top-rated?count=2')) == [4, 1]
    assert result_ids(client.get('/api/recipes/trending?count=1')) == [7]
    assert result_ids(client.get('/api/recipes/category/dessert')) == [1, 4]
    assert len(result_ids(client.get('/api/recipes/random?count=3'))) == 3


def test_get_recipe(client):
    response = client.get('/api/recipe/7')
    assert response.status_code == 200
    assert response.get_json()['ReviewCount'] == 2
    assert response.get_json()['AggregatedRating'] == 3.0
    assert client.get('/api/recipe/999').status_code == 404


def test_related_recipes(client):
    assert result_ids(client.get('/api/recipe/1/related')) == [4, 7]
    assert client.get('/api/recipe/999/related').status_code == 404


def test_create_recipe_requires_login(client):
    assert client.post('/api/recipes', json={'name': 'Toast'}).status_code == 401


def test_create_recipe_invalidates_cached_lists(client, auth_headers):
    assert result_ids(client.get('/api/recipes/recent?count=1')) == [1]

    response = client.post('/api/recipes', headers=auth_headers, json={
        'name': 'Pancakes',
        'description': 'Fluffy',
        'ingredients': [{'quantity': '2', 'part': 'eggs'}, {'quantity': '1 cup', 'part': 'flour'}],
        'instructions': ['Whisk', 'Fry'],
        'prep_time': 5,
        'cook_time': 10,
        'servings': 4,
        'keywords': 'Breakfast, Quick',
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body['newId'] == 8
    assert body['recipe']['RecipeIngredientParts'] == ['eggs', 'flour']
    assert body['recipe']['TotalTime'] == 'PT15M'
    assert body['recipe']['AuthorName'] == 'Tester'

    assert result_ids(client.get('/api/recipes/recent?count=1')) == [8]


def test_create_recipe_validation(client, auth_headers):
    no_name = client.post('/api/recipes', headers=auth_headers, json={'ingredients': [{'part': 'x'}]})
    assert no_name.status_code == 400

    no_ingredients = client.post('/api/recipes', headers=auth_headers, json={
        'name': 'Air', 'ingredients': [], 'instructions': 'Breathe'
    })
    assert no_ingredients.status_code == 400

    bad_time = client.post('/api/recipes', headers=auth_headers, json={
        'name': 'Soup', 'ingredients': [{'part': 'water'}], 'instructions': 'Boil', 'prep_time': 'soon'
    })
    assert bad_time.status_code == 400


# Reviews

def test_add_review_updates_recipe(client, auth_headers):
    assert result_ids(client.get('/api/recipes/trending?count=1')) == [7]

    for rating in (4, 2):
        response = client.post('/api/recipe/1/reviews', headers=auth_headers,
                               json={'rating': rating, 'review': 'Nice'})
        assert response.status_code == 201

    recipe = response.get_json()['recipe']
    assert recipe['ReviewCount'] == 2
    assert recipe['AggregatedRating'] == 3.0

    reviews = client.get('/api/recipe/1/reviews').get_json()
    assert [r['Rating'] for r in reviews['results']] == [2, 4]
    assert sorted(result_ids(client.get('/api/recipes/trending?count=2'))) == [1, 7]


def test_add_review_validation(client, auth_headers):
    bad_rating = client.post('/api/recipe/1/reviews', headers=auth_headers, json={'rating': 9, 'review': 'x'})
    assert bad_rating.status_code == 400

    no_text = client.post('/api/recipe/1/reviews', headers=auth_headers, json={'rating': 3, 'review': '  '})
    assert no_text.status_code == 400

    unknown = client.post('/api/recipe/999/reviews', headers=auth_headers, json={'rating': 3, 'review': 'x'})
    assert unknown.status_code == 404


def test_failed_write_returns_503_and_keeps_state(client, auth_headers, store):
    store.fail = True
    response = client.post('/api/recipe/1/reviews', headers=auth_headers, json={'rating': 5, 'review': 'Great'})
    assert response.status_code == 503
    assert 'error' in response.get_json()

    store.fail = False
    assert client.get('/api/recipe/1/reviews').get_json()['total'] == 0
    assert client.get('/api/recipe/1').get_json()['ReviewCount'] == 0


# Folders and bookmarks

def test_folder_and_bookmark_flow(client, auth_headers):
    folders = client.get('/api/folder', headers=auth_headers).get_json()
    assert [f['name'] for f in folders] == ['Favorites', 'Try Later']
    assert all(f['recipeCount'] == 0 for f in folders)

    created = client.post('/api/folder', headers=auth_headers, json={'name': 'Party', 'icon': 'star'})
    assert created.status_code == 201
    party = created.get_json()

    first = client.post('/api/bookmark', headers=auth_headers,
                        json={'recipe_id': 1, 'folder_id': folders[0]['id'], 'rating': 5})
    assert first.status_code == 201

    moved = client.post('/api/bookmark', headers=auth_headers,
                        json={'recipe_id': 1, 'folder_id': party['id'], 'rating': 3})
    assert moved.status_code == 200
    assert moved.get_json()['bookmark']['id'] == first.get_json()['bookmark']['id']

    detail = client.get(f"/api/folder/{party['id']}", headers=auth_headers).get_json()
    assert detail['folder']['recipeCount'] == 1
    assert detail['recipes'][0]['name'] == 'Chocolate Cake'
    assert detail['recipes'][0]['user_rating'] == 3

    recipe = client.get('/api/recipe/1', headers=auth_headers).get_json()
    assert recipe['bookmark']['folderId'] == party['id']

    deleted = client.delete(f"/api/folder/{party['id']}", headers=auth_headers)
    assert deleted.status_code == 200
    assert client.get('/api/bookmark/recipe/1', headers=auth_headers).status_code == 404


def test_folder_errors(client, auth_headers):
    assert client.post('/api/folder', headers=auth_headers, json={'name': ' '}).status_code == 400
    assert client.get('/api/folder/folder_missing', headers=auth_headers).status_code == 404
    assert client.put('/api/folder/folder_missing', headers=auth_headers, json={'name': 'x'}).status_code == 404
    assert client.delete('/api/folder/folder_missing', headers=auth_headers).status_code == 404


def test_rename_folder(client, auth_headers):
    folder = client.get('/api/folder', headers=auth_headers).get_json()[0]
    response = client.put(f"/api/folder/{folder['id']}", headers=auth_headers, json={'name': 'Loved'})
    assert response.status_code == 200
    assert response.get_json()['name'] == 'Loved'
    assert response.get_json()['color'] == folder['color']


def test_bookmark_errors(client, app, auth_headers):
    folder_id = client.get('/api/folder', headers=auth_headers).get_json()[0]['id']

    assert client.post('/api/bookmark', headers=auth_headers,
                       json={'recipe_id': 1, 'folder_id': folder_id, 'rating': 0}).status_code == 400
    assert client.post('/api/bookmark', headers=auth_headers,
                       json={'recipe_id': 999, 'folder_id': folder_id, 'rating': 4}).status_code == 404

    other = make_headers(app, 'user_2')
    assert client.post('/api/bookmark', headers=other,
                       json={'recipe_id': 1, 'folder_id': folder_id, 'rating': 4}).status_code == 404


def test_update_and_remove_bookmark(client, auth_headers):
    folder_id = client.get('/api/folder', headers=auth_headers).get_json()[0]['id']
    bookmark = client.post('/api/bookmark', headers=auth_headers,
                           json={'recipe_id': 4, 'folder_id': folder_id, 'rating': 2}).get_json()['bookmark']

    updated = client.put(f"/api/bookmark/{bookmark['id']}", headers=auth_headers, json={'rating': 5})
    assert updated.status_code == 200
    assert updated.get_json()['bookmark']['rating'] == 5

    assert client.put(f"/api/bookmark/{bookmark['id']}", headers=auth_headers,
                      json={'rating': 7}).status_code == 400
    assert client.delete(f"/api/bookmark/{bookmark['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/bookmark/{bookmark['id']}", headers=auth_headers).status_code == 404


# History

def test_history(client, auth_headers):
    folder_id = client.get('/api/folder', headers=auth_headers).get_json()[0]['id']
    client.get('/api/recipe/2', headers=auth_headers)
    client.get('/api/recipe/7', headers=auth_headers)
    client.post('/api/bookmark', headers=auth_headers, json={'recipe_id': 7, 'folder_id': folder_id, 'rating': 4})
    client.post('/api/recipe/2/reviews', headers=auth_headers, json={'rating': 5, 'review': 'Fresh'})

    history = client.get('/api/history', headers=auth_headers).get_json()
    assert [r['RecipeId'] for r in history['viewed']] == [7, 2]
    assert history['viewed'][0]['personalRating'] == 4
    assert history['viewed'][1]['personalRating'] is None
    assert [r['RecipeId'] for r in history['bookmarked']] == [7]
    assert [r['RecipeId'] for r in history['reviews']] == [2]
    assert history['created'] == []


def test_anonymous_views_are_not_recorded(client, store):
    assert client.get('/api/recipe/2').status_code == 200
    assert not any(key.startswith('viewed:') for key in store.documents)


# Profile

def login_demo(client):
    tokens = client.post('/api/auth/login', json={'email': 'demo@savory.app', 'password': 'savory123'}).get_json()
    return {'Authorization': f"Bearer {tokens['access_token']}"}


def test_update_profile(client, store):
    headers = login_demo(client)
    response = client.put('/api/auth/me', headers=headers,
                          json={'name': ' Chef Demo ', 'avatar': 'https://example.com/me.png', 'email': 'x@y.z'})
    assert response.status_code == 200
    body = response.get_json()
    assert body['user']['name'] == 'Chef Demo'
    assert body['user']['avatar'] == 'https://example.com/me.png'
    assert body['user']['email'] == 'demo@savory.app'
    assert body['access_token']

    me = client.get('/api/auth/me', headers=headers).get_json()['user']
    assert me['name'] == 'Chef Demo'

    stored = next(u for u in store.load('users') if u['id'] == 'user_demo')
    assert stored['avatar'] == 'https://example.com/me.png'
    assert stored['password_hash']

    # password survives the rewrite of the users document
    assert client.post('/api/auth/login', json={
        'email': 'demo@savory.app', 'password': 'savory123'
    }).status_code == 200


def test_update_profile_errors(client, auth_headers):
    headers = login_demo(client)
    assert client.put('/api/auth/me', headers=headers, json={'name': '  '}).status_code == 400
    assert client.put('/api/auth/me', headers=headers, json={'email': 'x@y.z'}).status_code == 400
    assert client.put('/api/auth/me', headers=auth_headers, json={'name': 'Ghost'}).status_code == 404
    assert client.put('/api/auth/me', json={'name': 'Anon'}).status_code == 401


def test_update_profile_write_failure(client, store):
    headers = login_demo(client)
    store.fail = True
    assert client.put('/api/auth/me', headers=headers, json={'name': 'Lost'}).status_code == 503

    store.fail = False
    assert client.get('/api/auth/me', headers=headers).get_json()['user']['name'] == 'Demo Cook'


def test_bookmark_cannot_move_to_unknown_folder(client, auth_headers):
    folder_id = client.get('/api/folder', headers=auth_headers).get_json()[0]['id']
    bookmark = client.post('/api/bookmark', headers=auth_headers,
                           json={'recipe_id': 1, 'folder_id': folder_id, 'rating': 4}).get_json()['bookmark']

    response = client.put(f"/api/bookmark/{bookmark['id']}", headers=auth_headers,
                          json={'folder_id': 'folder_missing'})
    assert response.status_code == 404
    assert client.get('/api/bookmark/recipe/1', headers=auth_headers).get_json()['folderId'] == folder_id
