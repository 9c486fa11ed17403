"""
Authentication API
==================

Registration, login and the current user's profile.
"""

from flask import Blueprint, current_app, jsonify, request

from ...schemas import LoginSchema, ProfileUpdateSchema, RegisterSchema, load_or_raise
from ...services.auth_service import AuthService
from ..decorators import token_required

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


def _auth_service() -> AuthService:
    return AuthService.from_config(current_app.config)


@auth_bp.route('/register', methods=['POST'])
def register():
    data = load_or_raise(RegisterSchema(), request.get_json(silent=True))
    user, token = _auth_service().register(data)
    return jsonify({
        'message': 'User registered successfully',
        'token': token,
        'user': user.to_dict(),
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = load_or_raise(LoginSchema(), request.get_json(silent=True))
    user, token = _auth_service().login(data['email'], data['password'])
    return jsonify({
        'message': 'Login successful',
        'token': token,
        'user': user.to_dict(),
    })


@auth_bp.route('/me', methods=['GET'])
@token_required
def me(user):
    return jsonify({'user': user.to_dict(include_profile=True)})


@auth_bp.route('/profile', methods=['PUT'])
@token_required
def update_profile(user):
    """Update profile fields and preferences; unknown preference keys are rejected."""
    data = load_or_raise(ProfileUpdateSchema(), request.get_json(silent=True))
    user = _auth_service().update_profile(user, data)
    return jsonify({
        'message': 'Profile updated successfully',
        'user': user.to_dict(include_profile=True),
    })
