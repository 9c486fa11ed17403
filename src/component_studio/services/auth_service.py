"""
Authentication Service
======================

Registration, login, profile edits and bearer-token handling (PyJWT,
HS256). Tokens carry the user id and expire after ``TOKEN_TTL_DAYS``.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Tuple

import jwt
from sqlalchemy.exc import IntegrityError

from ..constants import TOKEN_ALGORITHM, TOKEN_TTL_DAYS
from ..extensions import db
from ..models import User
from ..models.user import find_user_by_email
from ..utils.time import utc_now
from .service_base import AuthError, ForbiddenError, ValidationError

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('name', 'phone', 'date_of_birth', 'avatar', 'bio', 'location', 'website')


class AuthService:
    """Issues and validates tokens and manages user records."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(days=TOKEN_TTL_DAYS)):
        if not secret:
            raise ValueError("A JWT secret is required")
        self.secret = secret
        self.ttl = ttl

    @classmethod
    def from_config(cls, config) -> 'AuthService':
        return cls(config.get('JWT_SECRET') or config['SECRET_KEY'])

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def issue_token(self, user: User) -> str:
        now = utc_now()
        payload = {
            'user_id': user.id,
            'email': user.email,
            'iat': now,
            'exp': now + self.ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=TOKEN_ALGORITHM)

    def resolve_user(self, token: str) -> User:
        """Return the user a token belongs to.

        Raises:
            AuthError: no token was presented
            ForbiddenError: token invalid, expired or its user no longer exists
        """
        if not token:
            raise AuthError('Access token required')
        try:
            data = jwt.decode(token, self.secret, algorithms=[TOKEN_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise ForbiddenError('Token expired')
        except jwt.InvalidTokenError:
            raise ForbiddenError('Invalid or expired token')

        user = db.session.get(User, data.get('user_id'))
        if user is None:
            raise ForbiddenError('Invalid token: user not found')
        return user

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def register(self, data: Dict[str, Any]) -> Tuple[User, str]:
        """Create a user from validated registration data and log them in."""
        if find_user_by_email(data['email']):
            raise ValidationError('User already exists with this email')

        user = User(
            email=data['email'],
            name=data['name'],
            phone=data.get('phone'),
            date_of_birth=data.get('date_of_birth'),
        )
        user.set_password(data['password'])
        user.update_last_login()
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError('User already exists with this email')

        logger.info(f"Registered user {user.id}")
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        user = find_user_by_email(email)
        if user is None or not user.check_password(password):
            logger.info("Rejected login attempt")
            raise ValidationError('Invalid email or password')

        user.update_last_login()
        db.session.commit()
        return user, self.issue_token(user)

    def update_profile(self, user: User, data: Dict[str, Any]) -> User:
        """Apply validated profile fields; preferences are merged strictly."""
        preferences = user.preferences.merged(data['preferences']) if 'preferences' in data else None
        for field_name in PROFILE_FIELDS:
            if field_name in data:
                value = data[field_name]
                setattr(user, field_name, value.strip() if isinstance(value, str) else value)
        if preferences is not None:
            user.preferences = preferences
        db.session.commit()
        return user
