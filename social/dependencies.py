"""
FastAPI dependencies for the Social API.

Services are created once at startup by init_all_services() and handed to
routes through the getters below. Auth gates are exposed as composable
dependencies; route handlers never call the session manager themselves.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from social.auth.services.session_manager import SessionManager
from social.auth.services.token_hasher import TokenHasher
from social.config import Settings, settings as default_settings
from social.middleware.auth import AuthMiddleware
from social.users.models import Role
from social.users.services.user_service import UserService

logger = logging.getLogger(__name__)

_settings: Settings = default_settings
_user_service: Optional[UserService] = None
_token_hasher: Optional[TokenHasher] = None
_session_manager: Optional[SessionManager] = None
_auth_middleware: Optional[AuthMiddleware] = None


def init_all_services(db: AsyncIOMotorDatabase, app_settings: Optional[Settings] = None) -> None:
    """
    Initialize every service with the database connection.

    Called once at application startup (and by tests with a fake database).

    Args:
        db: MongoDB database connection
        app_settings: Settings override (defaults to environment settings)
    """
    global _settings, _user_service, _token_hasher, _session_manager, _auth_middleware

    _settings = app_settings or default_settings

    _user_service = UserService(db=db)
    _token_hasher = TokenHasher(rounds=_settings.BCRYPT_ROUNDS)
    _session_manager = SessionManager(
        user_service=_user_service,
        token_hasher=_token_hasher,
        ttl_hours=_settings.SESSION_TTL_HOURS,
    )
    _auth_middleware = AuthMiddleware(
        session_manager=_session_manager,
        token_header=_settings.CLIENT_TOKEN_HEADER,
        user_id_header=_settings.USER_ID_HEADER,
    )

    logger.info("Services initialized")


def get_settings() -> Settings:
    return _settings


def get_user_service() -> UserService:
    """Get user service instance."""
    if _user_service is None:
        raise RuntimeError("Services not initialized. Call init_all_services first.")
    return _user_service


def get_token_hasher() -> TokenHasher:
    """Get token hasher instance."""
    if _token_hasher is None:
        raise RuntimeError("Services not initialized. Call init_all_services first.")
    return _token_hasher


def get_session_manager() -> SessionManager:
    """Get session manager instance."""
    if _session_manager is None:
        raise RuntimeError("Services not initialized. Call init_all_services first.")
    return _session_manager


def get_auth_middleware() -> AuthMiddleware:
    """Get auth middleware instance."""
    if _auth_middleware is None:
        raise RuntimeError("Services not initialized. Call init_all_services first.")
    return _auth_middleware


# ─────────────────────────────────────────────────────────────────
# Auth gates
# ─────────────────────────────────────────────────────────────────

def verify_token(attach_user: bool = False):
    """
    Build a dependency that rejects requests without a live session.

    Args:
        attach_user: Expose the resolved user to the handler

    Usage:
        @router.get("/feed", dependencies=[Depends(verify_token())])
        async def feed(): ...

        @router.get("/me")
        async def me(user: Annotated[dict, Depends(verify_token(True))]): ...
    """

    async def _dependency(
        request: Request,
        auth_middleware: Annotated[AuthMiddleware, Depends(get_auth_middleware)],
    ) -> Optional[dict]:
        return await auth_middleware.authorize(request, require_identity=attach_user)

    return _dependency


require_session = verify_token(attach_user=False)
require_auth = verify_token(attach_user=True)


def require_role(role: Role):
    """
    Build a dependency restricting a route to ``role``.

    Must be declared after require_auth so the user is already resolved.

    Usage:
        @router.get("/stats")
        async def stats(
            user: Annotated[dict, Depends(require_auth)],
            _: Annotated[dict, Depends(require_admin)],
        ): ...
    """

    async def _dependency(
        request: Request,
        auth_middleware: Annotated[AuthMiddleware, Depends(get_auth_middleware)],
    ) -> dict:
        return auth_middleware.require_role(request, role)

    return _dependency


require_admin = require_role(Role.ADMIN)
