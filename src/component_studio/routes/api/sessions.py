"""
Sessions API
============

CRUD over the caller's component sessions plus archive and sharing.
Shared sessions are readable without authentication through
``/api/shared/<token>``.
"""

from flask import Blueprint, current_app, jsonify, request

from ...constants import SessionStatus
from ...schemas import SessionCreateSchema, SessionListQuerySchema, SessionUpdateSchema, load_or_raise
from ...services import session_service
from ..decorators import token_required

sessions_bp = Blueprint('sessions', __name__, url_prefix='/api/sessions')
shared_bp = Blueprint('shared', __name__, url_prefix='/api/shared')


@sessions_bp.route('', methods=['GET'])
@token_required
def list_sessions(user):
    query = load_or_raise(SessionListQuerySchema(), request.args.to_dict())
    return jsonify(session_service.list_sessions(user.id, **query))


@sessions_bp.route('', methods=['POST'])
@token_required
def create_session(user):
    data = load_or_raise(SessionCreateSchema(), request.get_json(silent=True))
    session = session_service.create_session(user.id, data.get('title'), data.get('description'))
    return jsonify(session.to_dict()), 201


@sessions_bp.route('/<int:session_id>', methods=['GET'])
@token_required
def get_session(user, session_id):
    return jsonify(session_service.get_owned_session(user.id, session_id).to_dict())


@sessions_bp.route('/<int:session_id>', methods=['PUT'])
@token_required
def update_session(user, session_id):
    changes = load_or_raise(SessionUpdateSchema(), request.get_json(silent=True))
    return jsonify(session_service.update_session(user.id, session_id, changes).to_dict())


@sessions_bp.route('/<int:session_id>', methods=['DELETE'])
@token_required
def delete_session(user, session_id):
    session_service.delete_session(user.id, session_id)
    return jsonify({'message': 'Session deleted successfully'})


@sessions_bp.route('/<int:session_id>/archive', methods=['PUT'])
@token_required
def archive_session(user, session_id):
    session = session_service.set_status(user.id, session_id, SessionStatus.ARCHIVED)
    return jsonify({'message': 'Session archived successfully', 'session': session.to_dict()})


@sessions_bp.route('/<int:session_id>/unarchive', methods=['PUT'])
@token_required
def unarchive_session(user, session_id):
    session = session_service.set_status(user.id, session_id, SessionStatus.ACTIVE)
    return jsonify({'message': 'Session restored successfully', 'session': session.to_dict()})


@sessions_bp.route('/<int:session_id>/share', methods=['PUT'])
@token_required
def share_session(user, session_id):
    session, token = session_service.share_session(user.id, session_id)
    frontend_url = current_app.config['FRONTEND_URL'].rstrip('/')
    return jsonify({
        'message': 'Session shared successfully',
        'shareUrl': f"{frontend_url}/shared/{token}",
        'shareId': token,
        'session': session.to_dict(),
    })


@sessions_bp.route('/<int:session_id>/share', methods=['DELETE'])
@token_required
def unshare_session(user, session_id):
    session = session_service.unshare_session(user.id, session_id)
    return jsonify({'message': 'Sharing disabled', 'session': session.to_dict()})


@shared_bp.route('/<token>', methods=['GET'])
def get_shared_session(token):
    return jsonify({'session': session_service.get_shared_session(token).to_shared_dict()})
