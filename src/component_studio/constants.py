"""
Application Constants
=====================

Fixed values for generation, auth, uploads and the preview document.
Environment-dependent settings live in ``config/settings.py``.
"""

from enum import Enum


class Dialect(str, Enum):
    JSX = 'jsx'
    TSX = 'tsx'

    @classmethod
    def values(cls):
        return [d.value for d in cls]


class SessionStatus(str, Enum):
    ACTIVE = 'active'
    ARCHIVED = 'archived'


class MessageRole(str, Enum):
    USER = 'user'
    ASSISTANT = 'assistant'


# Generation
DEFAULT_MODEL = 'microsoft/wizardlm-2-8x22b'
GENERATION_TIMEOUT_SECONDS = 30
GENERATION_MAX_TOKENS = 4000
GENERATION_TEMPERATURE = 0.7
GENERATION_TOP_P = 0.9
GENERATION_TITLE = 'AI Component Generator'
FALLBACK_COMPONENT_NAME = 'GeneratedComponent'
DEFAULT_EXPLANATION = 'Component generated successfully.'
FALLBACK_DESCRIPTION = 'Generated component'

# Auth
TOKEN_TTL_DAYS = 7
TOKEN_ALGORITHM = 'HS256'
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2

# Sessions
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
LAST_MESSAGE_PREVIEW_CHARS = 100
SHARE_TOKEN_BYTES = 16

# Uploads
MAX_UPLOAD_FILES = 5
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_UPLOAD_EXTENSIONS = frozenset({'jpeg', 'jpg', 'png', 'gif', 'pdf', 'txt', 'doc', 'docx'})
ALLOWED_UPLOAD_MIMETYPES = frozenset({
    'image/jpeg',
    'image/png',
    'image/gif',
    'application/pdf',
    'text/plain',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
})

# Export
DEFAULT_EXPORT_NAME = 'component'
REACT_VERSION_RANGE = '^18.2.0'
TYPESCRIPT_VERSION_RANGE = '^5.0.0'

# Preview runtime
REACT_CDN_URL = 'https://unpkg.com/react@18/umd/react.development.js'
REACT_DOM_CDN_URL = 'https://unpkg.com/react-dom@18/umd/react-dom.development.js'
BABEL_CDN_URL = 'https://unpkg.com/@babel/standalone/babel.min.js'
TAILWIND_CDN_URL = 'https://cdn.tailwindcss.com'
PREVIEW_RUNTIME_GLOBALS = ('React', 'ReactDOM', 'Babel')
