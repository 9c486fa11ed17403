"""
Generation API
==============

``POST /api/generate`` runs one generation turn. With a ``sessionId`` the
exchange is appended to that session and its code becomes the session's
current component.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from ...schemas import GenerateRequestSchema, load_or_raise
from ...services import session_service
from ...services.generation_service import GenerationRequest, GenerationService, validate_request
from ...services.openrouter_client import OpenRouterClient
from ..decorators import token_required

logger = logging.getLogger(__name__)

gen_bp = Blueprint('generation', __name__, url_prefix='/api')


def _generation_service() -> GenerationService:
    return GenerationService(
        OpenRouterClient.from_config(current_app.config),
        expose_upstream_details=current_app.config.get('APP_ENV') == 'development',
    )


@gen_bp.route('/generate', methods=['POST'])
@token_required
def generate(user):
    data = load_or_raise(GenerateRequestSchema(), request.get_json(silent=True))
    preferences = user.preferences

    generation_request = GenerationRequest(
        prompt=data.get('prompt') or '',
        model=data.get('model') or preferences.default_model,
        language=data.get('language') or preferences.default_language,
        attachments=data.get('attachments') or [],
        previous_code=data.get('previous_code'),
    )
    validate_request(generation_request)

    session = None
    if data.get('session_id') is not None:
        session = session_service.get_owned_session(user.id, data['session_id'])

    result = _generation_service().generate(generation_request)
    payload = result.to_dict()

    if session is not None:
        session = session_service.record_generation_turn(
            session,
            prompt=generation_request.prompt,
            attachments=generation_request.attachments,
            result=result,
        )
        payload['sessionId'] = session.id
        payload['version'] = session.current_component.get('version')

    return jsonify(payload)
