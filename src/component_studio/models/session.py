"""
Component Session Models
========================

A ``ComponentSession`` is one user-owned conversation plus the latest
generated component. Messages and the current component are kept as JSON
document columns so a session reads and writes as a single record.
JSON columns are always reassigned (never mutated in place) so SQLAlchemy
sees the change.
"""

from typing import Any, Dict, Iterable, Optional

from ..constants import LAST_MESSAGE_PREVIEW_CHARS, Dialect, SessionStatus
from ..extensions import db
from ..utils.time import isoformat, utc_now


def empty_component() -> Dict[str, Any]:
    return {
        'jsx': '',
        'tsx': '',
        'css': '',
        'preview': '',
        'language': Dialect.JSX.value,
        'version': 0,
    }


class ComponentSession(db.Model):
    """Conversation session owned by exactly one user."""

    __tablename__ = 'component_sessions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default='')
    status = db.Column(db.String(20), nullable=False, default=SessionStatus.ACTIVE.value, index=True)
    is_shared = db.Column(db.Boolean, nullable=False, default=False)

    messages = db.Column(db.JSON, nullable=False, default=list)
    current_component = db.Column(db.JSON, nullable=False, default=empty_component)
    tags = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now, index=True)

    user = db.relationship('User', back_populates='sessions')
    share_links = db.relationship(
        'ShareLink',
        back_populates='session',
        cascade='all, delete-orphan',
        order_by='ShareLink.id',
    )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def append_messages(self, new_messages: Iterable[Dict[str, Any]]) -> None:
        self.messages = [*(self.messages or []), *new_messages]

    def replace_component(self, bundle: Dict[str, Any], language: Optional[str] = None) -> None:
        """Replace the current component; the version always moves forward by one."""
        previous = self.current_component or empty_component()
        self.current_component = {
            'jsx': bundle.get('jsx') or '',
            'tsx': bundle.get('tsx') or '',
            'css': bundle.get('css') or '',
            'preview': bundle.get('preview') or '',
            'language': language or bundle.get('language') or previous.get('language') or Dialect.JSX.value,
            'version': int(previous.get('version') or 0) + 1,
        }

    def touch(self) -> None:
        self.updated_at = utc_now()

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def has_code(self) -> bool:
        component = self.current_component or {}
        return bool(component.get('jsx') or component.get('tsx'))

    @property
    def last_message_preview(self) -> str:
        if not self.messages:
            return 'No messages yet'
        content = str(self.messages[-1].get('content') or '')
        return content[:LAST_MESSAGE_PREVIEW_CHARS] + '...'

    @property
    def latest_share_token(self) -> Optional[str]:
        return self.share_links[-1].token if self.share_links else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'userId': self.user_id,
            'title': self.title,
            'description': self.description or '',
            'status': self.status,
            'isShared': self.is_shared,
            'shareId': self.latest_share_token,
            'messages': list(self.messages or []),
            'currentComponent': dict(self.current_component or empty_component()),
            'tags': list(self.tags or []),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def to_summary(self) -> Dict[str, Any]:
        """List-view representation: no message bodies or preview document."""
        component = dict(self.current_component or empty_component())
        component.pop('preview', None)
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description or '',
            'status': self.status,
            'isShared': self.is_shared,
            'currentComponent': component,
            'tags': list(self.tags or []),
            'messageCount': len(self.messages or []),
            'lastMessage': self.last_message_preview,
            'hasCode': self.has_code,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def to_shared_dict(self) -> Dict[str, Any]:
        """Read-only view served to anyone holding a share link."""
        data = self.to_dict()
        data.pop('userId', None)
        data['author'] = self.user.name if self.user else None
        return data

    def __repr__(self) -> str:
        return f'<ComponentSession {self.id} {self.title!r}>'


class ShareLink(db.Model):
    """Opaque token resolving to a shared session; a session may have many."""

    __tablename__ = 'share_links'

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    session_id = db.Column(db.Integer, db.ForeignKey('component_sessions.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now)

    session = db.relationship('ComponentSession', back_populates='share_links')

    def __repr__(self) -> str:
        return f'<ShareLink {self.token[:8]}... session={self.session_id}>'

