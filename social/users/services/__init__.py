"""
User System Services
"""

from social.users.services.user_service import UserService, format_user_response

__all__ = ["UserService", "format_user_response"]
