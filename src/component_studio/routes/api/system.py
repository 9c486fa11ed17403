"""
System API
==========

Health check and per-user usage statistics.
"""

from flask import Blueprint, current_app, jsonify

from ...services.health_service import health_report
from ...services.session_service import user_stats
from ..decorators import token_required

system_bp = Blueprint('system', __name__, url_prefix='/api')


@system_bp.route('/health', methods=['GET'])
def api_health():
    return jsonify(health_report(current_app.config.get('APP_ENV', 'development')))


@system_bp.route('/user/stats', methods=['GET'])
@token_required
def get_user_stats(user):
    return jsonify(user_stats(user.id))
