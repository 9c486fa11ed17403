"""
User Model for Authentication
=============================

User accounts, credentials, profile fields and preferences.
"""

from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..config.preferences import Preferences
from ..extensions import db
from ..utils.time import isoformat, utc_now


class User(db.Model):
    """
    Registered user.

    Emails are stored lower-cased; users are never hard-deleted.
    """

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Profile
    name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(40))
    date_of_birth = db.Column(db.Date)
    avatar = db.Column(db.String(500))
    bio = db.Column(db.String(500))
    location = db.Column(db.String(120))
    website = db.Column(db.String(300))

    # Stored as the camelCase dict produced by Preferences.to_dict()
    preferences_data = db.Column('preferences', db.JSON, nullable=False, default=dict)

    # Timestamps
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now)
    last_login = db.Column(db.DateTime(timezone=True))

    sessions = db.relationship('ComponentSession', back_populates='user', lazy='dynamic')

    def __init__(self, email: str, name: str, **profile: Any):
        self.email = email.strip().lower()
        self.name = name.strip()
        for key, value in profile.items():
            setattr(self, key, value)
        self.preferences_data = Preferences().to_dict()

    def set_password(self, password: str) -> None:
        """Hash and store a password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Check a plain text password against the stored hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def update_last_login(self) -> None:
        self.last_login = utc_now()

    @property
    def preferences(self) -> Preferences:
        return Preferences.from_dict(self.preferences_data)

    @preferences.setter
    def preferences(self, value: Preferences) -> None:
        self.preferences_data = value.to_dict()

    def to_dict(self, include_profile: bool = False) -> Dict[str, Any]:
        """Public representation; ``include_profile`` adds profile and timestamps."""
        data: Dict[str, Any] = {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'preferences': self.preferences.to_dict(),
        }
        if include_profile:
            data.update({
                'phone': self.phone,
                'dateOfBirth': self.date_of_birth.isoformat() if self.date_of_birth else None,
                'avatar': self.avatar,
                'bio': self.bio,
                'location': self.location,
                'website': self.website,
                'createdAt': isoformat(self.created_at),
                'lastLogin': isoformat(self.last_login),
            })
        return data

    def __repr__(self) -> str:
        return f'<User {self.email}>'


def find_user_by_email(email: Optional[str]) -> Optional[User]:
    if not email:
        return None
    return User.query.filter_by(email=email.strip().lower()).first()
