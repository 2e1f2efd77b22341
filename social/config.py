"""
Social API application settings.

Extends the base settings with session and credential configuration.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Social API settings."""

    # ==========================================================================
    # Session Settings
    # ==========================================================================
    # Absolute lifetime of a session issued at sign-in
    SESSION_TTL_HOURS: int = 24

    # Client tokens shorter than this are rejected at sign-in as malformed
    CLIENT_TOKEN_MIN_LENGTH: int = 32

    # bcrypt cost factor for passwords and session tokens
    BCRYPT_ROUNDS: int = 10

    # Credential headers carried by every protected request
    CLIENT_TOKEN_HEADER: str = "x-client-token"
    USER_ID_HEADER: str = "x-user-id"

    # ==========================================================================
    # Account Settings
    # ==========================================================================
    PASSWORD_MIN_LENGTH: int = 8


settings = Settings()
