"""
Authentication primitives shared across apps - bcrypt secret hashing.
"""

from common.auth.hashing import hash_secret, verify_secret

__all__ = ["hash_secret", "verify_secret"]
