"""
Session Service
===============

Ownership-scoped operations on component sessions. Every lookup filters
by the caller's user id; a session owned by someone else is reported as
not found. Updates are find-by-id-and-owner then commit (last write wins).
"""

import logging
import math
import secrets
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import or_

from ..constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SHARE_TOKEN_BYTES, MessageRole, SessionStatus
from ..extensions import db
from ..models import ComponentSession, ShareLink
from ..schemas import AttachmentSchema
from ..utils.time import utc_now
from .service_base import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _escape_like(term: str) -> str:
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def get_owned_session(user_id: int, session_id: int) -> ComponentSession:
    session = ComponentSession.query.filter_by(id=session_id, user_id=user_id).first()
    if session is None:
        raise NotFoundError('Session not found')
    return session


def list_sessions(user_id: int, *, page: int = 1, limit: Optional[int] = None, search: str = '',
                  status: str = SessionStatus.ACTIVE.value) -> Dict[str, Any]:
    """One page of the caller's sessions, most recently updated first."""
    if limit is None:
        limit = DEFAULT_PAGE_SIZE
    if page < 1:
        raise ValidationError('page must be at least 1')
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f'limit must be between 1 and {MAX_PAGE_SIZE}')

    query = ComponentSession.query.filter_by(user_id=user_id, status=status)
    search = (search or '').strip()
    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.filter(or_(
            ComponentSession.title.ilike(pattern, escape='\\'),
            ComponentSession.description.ilike(pattern, escape='\\'),
        ))

    total = query.count()
    skip = (page - 1) * limit
    sessions = (
        query.order_by(ComponentSession.updated_at.desc(), ComponentSession.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

    return {
        'sessions': [s.to_summary() for s in sessions],
        'pagination': {
            'current': page,
            'total': math.ceil(total / limit),
            'totalItems': total,
            'limit': limit,
            'hasNext': skip + len(sessions) < total,
            'hasPrev': page > 1,
        },
    }


def create_session(user_id: int, title: Optional[str] = None, description: Optional[str] = None) -> ComponentSession:
    title = (title or '').strip() or f"New Session {utc_now().strftime('%Y-%m-%d')}"
    session = ComponentSession(user_id=user_id, title=title, description=(description or '').strip())
    db.session.add(session)
    db.session.commit()
    logger.info(f"Created session {session.id} for user {user_id}")
    return session


def message_document(message: Dict[str, Any]) -> Dict[str, Any]:
    """Stored (camelCase) form of a message loaded by MessageSchema."""
    document = {
        'role': message['role'],
        'content': message['content'],
        'timestamp': message.get('timestamp') or utc_now().isoformat(),
        'attachments': list(message.get('attachments') or []),
    }
    if message.get('component_code'):
        document['componentCode'] = message['component_code']
    if message.get('metadata'):
        document['metadata'] = message['metadata']
    return document


def update_session(user_id: int, session_id: int, changes: Dict[str, Any]) -> ComponentSession:
    """Apply validated changes from SessionUpdateSchema."""
    session = get_owned_session(user_id, session_id)

    if 'title' in changes:
        session.title = changes['title'].strip() or session.title
    if 'description' in changes:
        session.description = (changes['description'] or '').strip()
    if 'tags' in changes:
        session.tags = list(dict.fromkeys(tag.strip() for tag in changes['tags'] if tag.strip()))
    if 'status' in changes:
        session.status = changes['status']
    if 'messages' in changes:
        session.messages = [message_document(m) for m in changes['messages']]
    if 'current_component' in changes:
        session.replace_component(changes['current_component'])

    session.touch()
    db.session.commit()
    return session


def delete_session(user_id: int, session_id: int) -> None:
    session = get_owned_session(user_id, session_id)
    db.session.delete(session)
    db.session.commit()
    logger.info(f"Deleted session {session_id} for user {user_id}")


def set_status(user_id: int, session_id: int, status: SessionStatus) -> ComponentSession:
    session = get_owned_session(user_id, session_id)
    session.status = status.value
    session.touch()
    db.session.commit()
    return session


def share_session(user_id: int, session_id: int) -> Tuple[ComponentSession, str]:
    """Issue a fresh share token; earlier tokens stay valid until unshared."""
    session = get_owned_session(user_id, session_id)
    token = secrets.token_hex(SHARE_TOKEN_BYTES)
    session.share_links.append(ShareLink(token=token))
    session.is_shared = True
    session.touch()
    db.session.commit()
    return session, token


def unshare_session(user_id: int, session_id: int) -> ComponentSession:
    """Revoke every share token of the session."""
    session = get_owned_session(user_id, session_id)
    revoked = len(session.share_links)
    session.share_links = []
    session.is_shared = False
    session.touch()
    db.session.commit()
    logger.info(f"Revoked {revoked} share link(s) for session {session_id}")
    return session


def get_shared_session(token: str) -> ComponentSession:
    link = ShareLink.query.filter_by(token=token).first()
    if link is None or not link.session.is_shared:
        raise NotFoundError('Shared session not found')
    return link.session


def record_generation_turn(session: ComponentSession, *, prompt: str, attachments: Iterable[Dict[str, Any]],
                           result) -> ComponentSession:
    """Append the user/assistant exchange and make its code the current component."""
    now = utc_now().isoformat()
    component_code = {k: result.component_code.get(k, '') for k in ('jsx', 'tsx', 'css', 'preview')}
    session.append_messages([
        {
            'role': MessageRole.USER.value,
            'content': prompt,
            'timestamp': now,
            'attachments': AttachmentSchema(many=True).dump(list(attachments)),
        },
        {
            'role': MessageRole.ASSISTANT.value,
            'content': result.response,
            'timestamp': now,
            'attachments': [],
            'componentCode': component_code,
            'metadata': result.metadata,
        },
    ])
    session.replace_component(component_code, language=result.language)
    session.touch()
    db.session.commit()
    return session


def user_stats(user_id: int) -> Dict[str, int]:
    sessions: List[ComponentSession] = ComponentSession.query.filter_by(user_id=user_id).all()
    return {
        'sessions': len(sessions),
        'messages': sum(len(s.messages or []) for s in sessions),
        'components': sum(1 for s in sessions if s.has_code),
    }
