"""
User system - account records (credential store) and public profiles.
"""

from social.users.models import Role, Gender
from social.users.services.user_service import UserService, format_user_response

__all__ = [
    "Role",
    "Gender",
    "UserService",
    "format_user_response",
]
