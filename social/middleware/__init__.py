"""
Social API middleware.
"""

from social.middleware.auth import AuthMiddleware, PresentedCredential

__all__ = [
    "AuthMiddleware",
    "PresentedCredential",
]
