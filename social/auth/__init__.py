"""
Auth System

Client-token sessions stored as bcrypt hashes on the user document,
with a 24h absolute expiry and one active session per account.
"""

from social.auth.services.token_hasher import TokenHasher
from social.auth.services.session_manager import SessionManager

__all__ = [
    "TokenHasher",
    "SessionManager",
]
