from flask import current_app, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, jwt_required

from . import auth_bp


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new user"""
    data = request.get_json(silent=True) or {}

    # Validate required fields
    required_fields = ['username', 'email', 'password']
    for field in required_fields:
        if not data.get(field):
            return jsonify({'error': f'Missing required field: {field}'}), 400

    body, status = current_app.auth_service.register_user(
        data['username'], data['email'], data['password'], name=data.get('name')
    )
    return jsonify(body), status


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login a user"""
    data = request.get_json(silent=True) or {}

    if not data.get('email') or not data.get('password'):
        return jsonify({'error': 'Email and password are required'}), 400

    body, status = current_app.auth_service.login_user(data['email'], data['password'])
    return jsonify(body), status


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """Logout a user"""
    # For JWT, logout is handled client-side by removing tokens
    return jsonify({'message': 'Logout successful'}), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_me():
    """Get current user information"""
    user = current_app.auth_service.get_user_by_id(get_jwt_identity())
    if not user:
        return jsonify({"error": "User not found"}), 404

    return jsonify({"user": user.to_dict()}), 200


@auth_bp.route('/me', methods=['PUT'])
@jwt_required()
def update_me():
    """Update the current user's name and/or avatar"""
    data = request.get_json(silent=True) or {}
    body, status = current_app.auth_service.update_user(get_jwt_identity(), data)
    return jsonify(body), status


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """Refresh access token"""
    current_user = get_jwt_identity()
    claims = {'name': get_jwt().get('name', '')}
    new_access_token = create_access_token(identity=current_user, additional_claims=claims)

    return jsonify({
        'access_token': new_access_token
    }), 200
