"""
Component Studio
================

Flask backend for conversational React component generation: users chat
with an OpenRouter model, receive JSX/TSX/CSS plus a live preview
document, keep the conversation as a session and export code as a ZIP.
"""

__version__ = '0.1.0'
