"""
Authentication middleware for protected routes.

Validates the client-token session and attaches the user to the request.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from common.utils.exceptions import ForbiddenException
from social.auth.exceptions import CredentialsMissing, Unauthenticated
from social.auth.services.session_manager import SessionManager
from social.users.models import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresentedCredential:
    """Identity claim and raw token, parsed once at the request boundary."""
    user_id: str
    client_token: str


class AuthMiddleware:
    """
    Middleware that validates the session and attaches user to request.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        token_header: str = "x-client-token",
        user_id_header: str = "x-user-id",
    ):
        """
        Initialize AuthMiddleware.

        Args:
            session_manager: For session validation
            token_header: Header carrying the raw client token
            user_id_header: Header carrying the claimed user id
        """
        self._session_manager = session_manager
        self._token_header = token_header
        self._user_id_header = user_id_header

    async def authorize(self, request: Request, require_identity: bool = False) -> Optional[dict]:
        """
        Validate that the request carries a live session.

        Args:
            request: HTTP request object
            require_identity: Expose the resolved user downstream

        Returns:
            User dict if require_identity, else None

        Raises:
            CredentialsMissing: token or user id header absent
            SessionInvalid: session does not verify
            StoreUnavailable: credential store error

        Side Effects:
            - Attaches user to request.state.user when require_identity
        """
        credential = self.extract_credential(request)
        if credential is None:
            raise CredentialsMissing()

        user = await self._session_manager.verify_session(
            credential.user_id,
            credential.client_token,
        )

        if not require_identity:
            return None

        request.state.user = user
        return user

    def require_role(self, request: Request, role: Role) -> dict:
        """
        Check the already-resolved user holds ``role``.

        Must run after authorize(require_identity=True).

        Raises:
            Unauthenticated: no user attached to the request
            ForbiddenException: user lacks the role
        """
        user = getattr(request.state, "user", None)
        if not user:
            raise Unauthenticated()

        if user.get("role") != role.value:
            logger.info(f"User {user.get('_id')} denied: {role.value} role required")
            raise ForbiddenException(
                message=f"{role.value.capitalize()} access required",
                code=f"{role.value}_access_required",
            )

        return user

    def extract_credential(self, request: Request) -> Optional[PresentedCredential]:
        """
        Read the credential headers.

        Returns:
            PresentedCredential if both headers are present and non-blank,
            None otherwise
        """
        client_token = (request.headers.get(self._token_header) or "").strip()
        user_id = (request.headers.get(self._user_id_header) or "").strip()

        if not client_token or not user_id:
            return None

        return PresentedCredential(user_id=user_id, client_token=client_token)
