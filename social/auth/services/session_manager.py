"""
Session management for client-token authentication.

A session lives on the user document itself: ``token`` holds the bcrypt
hash of the client-generated token and ``token_expiration`` its absolute
expiry. One session per account; a new sign-in overwrites the previous one.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool
from pymongo.errors import PyMongoError

from common.utils.exceptions import NotFoundException
from social.auth.exceptions import (
    AccountNotFound,
    SessionFailure,
    SessionInvalid,
    StoreUnavailable,
)
from social.auth.services.token_hasher import TokenHasher
from social.users.services.user_service import UserService, strip_secrets

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Motor returns naive datetimes (UTC) unless the client is tz_aware
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionManager:
    """
    Issues, verifies and revokes sessions.
    """

    DEFAULT_TTL_HOURS = 24

    def __init__(
        self,
        user_service: UserService,
        token_hasher: TokenHasher,
        ttl_hours: int = DEFAULT_TTL_HOURS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize SessionManager.

        Args:
            user_service: Credential store access
            token_hasher: Hashes and verifies session tokens
            ttl_hours: Session lifetime from sign-in
            clock: Returns the current UTC time
        """
        self._user_service = user_service
        self._token_hasher = token_hasher
        self._ttl = timedelta(hours=ttl_hours)
        self._clock = clock

    async def issue_session(self, user_id: str, client_token: str) -> datetime:
        """
        Store the hash of a client token as the account's only session.

        Args:
            user_id: MongoDB user ID
            client_token: Raw token generated by the client

        Returns:
            Expiry of the new session

        Raises:
            AccountNotFound: account deleted since the credential check
            StoreUnavailable: database error
        """
        token_hash = await run_in_threadpool(self._token_hasher.hash_token, client_token)
        expires_at = self._clock() + self._ttl

        try:
            updated = await self._user_service.set_session(user_id, token_hash, expires_at)
        except PyMongoError as e:
            logger.error(f"Failed to store session for user {user_id}: {e}")
            raise StoreUnavailable()

        if not updated:
            logger.error(f"Account {user_id} disappeared before its session was stored")
            raise AccountNotFound(user_id)

        logger.info(f"Session issued for user {user_id}, expires {expires_at.isoformat()}")
        return expires_at

    async def verify_session(self, user_id: str, client_token: str) -> dict:
        """
        Check a presented token against the account's stored session.

        Args:
            user_id: Claimed identity
            client_token: Raw token presented by the client

        Returns:
            The user document without credential fields

        Raises:
            SessionInvalid: unknown identity, expired, no session or bad token
            StoreUnavailable: database error
        """
        user = await self._load_user(user_id)
        if not user:
            raise self._rejected(user_id, SessionFailure.UNKNOWN_IDENTITY)

        await self._check_session(user_id, user, client_token)
        return strip_secrets(user)

    async def revoke_session(self, user_id: str, client_token: str) -> None:
        """
        Sign out: clear the session if the caller holds its still-valid token.

        Not idempotent; revoking without a live session fails. The clear
        only matches the hash that was verified, so a sign-in landing in
        between keeps its new session.

        Raises:
            NotFoundException: unknown account
            SessionInvalid: expired, no stored session, token mismatch or
                session replaced meanwhile
            StoreUnavailable: database error
        """
        user = await self._load_user(user_id)
        if not user:
            raise NotFoundException(message="User not found", code="user_not_found")

        token_hash = await self._check_session(user_id, user, client_token)

        try:
            cleared = await self._user_service.clear_session(user_id, token_hash)
        except PyMongoError as e:
            logger.error(f"Failed to clear session for user {user_id}: {e}")
            raise StoreUnavailable()

        if not cleared:
            raise self._rejected(user_id, SessionFailure.BAD_TOKEN)

        logger.info(f"Session revoked for user {user_id}")

    async def _check_session(self, user_id: str, user: dict, client_token: str) -> str:
        """Expiry, presence and hash checks; returns the matched token hash."""
        expires_at = user.get("token_expiration")
        if expires_at is None or not _as_utc(expires_at) > self._clock():
            raise self._rejected(user_id, SessionFailure.EXPIRED)

        token_hash = user.get("token")
        if not token_hash:
            raise self._rejected(user_id, SessionFailure.NO_ACTIVE_SESSION)

        if not await run_in_threadpool(self._token_hasher.verify_token, client_token, token_hash):
            raise self._rejected(user_id, SessionFailure.BAD_TOKEN)

        return token_hash

    async def _load_user(self, user_id: str) -> Optional[dict]:
        try:
            return await self._user_service.get_user_by_id(user_id)
        except PyMongoError as e:
            logger.error(f"Credential store lookup failed for user {user_id}: {e}")
            raise StoreUnavailable()

    @staticmethod
    def _rejected(user_id: str, reason: str) -> SessionInvalid:
        logger.info(f"Session rejected for user {user_id}: {reason}")
        return SessionInvalid(reason)
