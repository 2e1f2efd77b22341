"""
Auth System Services

Token hashing and session lifecycle.
"""

from social.auth.services.token_hasher import TokenHasher
from social.auth.services.session_manager import SessionManager

__all__ = [
    "TokenHasher",
    "SessionManager",
]
