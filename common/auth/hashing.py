"""
bcrypt hashing for secrets (passwords, session tokens).

Secrets are pre-hashed with SHA-256 before bcrypt. This sidesteps bcrypt's
72-byte input limit and gives consistent behaviour for every input length.

Example:
    from common.auth import hash_secret, verify_secret

    stored = hash_secret("password123")
    verify_secret("password123", stored)  # True
"""

import base64
import hashlib

import bcrypt

DEFAULT_ROUNDS = 10


def _prehash(secret: str) -> bytes:
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_secret(secret: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a secret with bcrypt using a fresh salt."""
    if not secret:
        raise ValueError("Cannot hash an empty secret")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_prehash(secret), salt).decode("utf-8")


def verify_secret(secret: str, hashed: str) -> bool:
    """
    Check a secret against a stored bcrypt hash.

    Salt and cost are read from the hash itself. Empty inputs and
    malformed hashes never match.
    """
    if not secret or not hashed:
        return False
    try:
        return bcrypt.checkpw(_prehash(secret), hashed.encode("utf-8"))
    except ValueError:
        return False
