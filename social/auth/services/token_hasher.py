"""
Session token generation and hashing.

Raw tokens are never stored; only their bcrypt hash is persisted.
"""

import secrets

from common.auth import hash_secret, verify_secret


class TokenHasher:
    """
    Handles token generation, hashing and verification.
    """

    def __init__(self, rounds: int = 10):
        """
        Args:
            rounds: bcrypt cost factor
        """
        self._rounds = rounds

    @staticmethod
    def generate_token(length: int = 32) -> str:
        """
        Generate a cryptographically secure random token.

        Args:
            length: Number of random bytes (output will be hex, so 2x length)

        Returns:
            Hex-encoded random string
        """
        return secrets.token_hex(length)

    def hash_token(self, token: str) -> str:
        """Create a salted bcrypt hash of a token for storage."""
        return hash_secret(token, rounds=self._rounds)

    def verify_token(self, token: str, token_hash: str) -> bool:
        """Check a presented token against its stored hash."""
        return verify_secret(token, token_hash)
