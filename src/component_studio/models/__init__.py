"""
Database Models
===============

SQLAlchemy models for users, component sessions and share links.
"""

from .user import User
from .session import ComponentSession, ShareLink

__all__ = ['User', 'ComponentSession', 'ShareLink']
