"""
Social API Routers.
"""

from social.routers.auth import router as auth_router
from social.routers.users import router as user_router
from social.routers.admin import router as admin_router

__all__ = [
    "auth_router",
    "user_router",
    "admin_router",
]
