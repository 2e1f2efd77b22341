"""
Auth system pipeline functions.

Stateless orchestration logic for sign-up, sign-in, verify and sign-out.
"""

import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from pymongo.errors import PyMongoError

from common.auth import hash_secret, verify_secret
from common.utils.exceptions import ValidationException
from social.auth.exceptions import (
    CredentialsMissing,
    InvalidCredentials,
    MalformedToken,
    StoreUnavailable,
)
from social.auth.services.session_manager import SessionManager
from social.users.pipelines import check_age, check_email, check_gender
from social.users.services.user_service import UserService, format_user_response

logger = logging.getLogger(__name__)


async def signup_pipeline(
    user_service: UserService,
    email: str,
    password: str,
    name: str,
    age: Optional[int] = None,
    gender: Optional[str] = None,
    icon: Optional[str] = None,
    password_min_length: int = 8,
    bcrypt_rounds: int = 10,
) -> dict:
    """
    Orchestrates account creation.

    Returns:
        dict with message and public user profile

    Raises:
        ValidationException: invalid_email, weak_password, name_required,
            invalid_age, invalid_gender
        ConflictException: email_taken
    """
    email = check_email(email)

    if not password or len(password) < password_min_length:
        raise ValidationException(
            message=f"Password must be at least {password_min_length} characters",
            code="weak_password",
        )

    if not name or not name.strip():
        raise ValidationException(message="Name is required", code="name_required")

    age = check_age(age)
    gender = check_gender(gender)

    password_hash = await run_in_threadpool(hash_secret, password, bcrypt_rounds)

    user = await user_service.create_user(
        email=email,
        password_hash=password_hash,
        name=name.strip(),
        age=age,
        gender=gender or None,
        icon=icon.strip() if icon and icon.strip() else None,
    )

    return {
        "message": "User created",
        "user": format_user_response(user),
    }


async def signin_pipeline(
    user_service: UserService,
    session_manager: SessionManager,
    email: str,
    password: str,
    client_token: str,
    client_token_min_length: int = 32,
) -> dict:
    """
    Orchestrates sign-in with a client-generated token.

    Input is fully validated before any store access, so a malformed
    request never mutates the account.

    Returns:
        dict with message and public user profile (no password, no token)

    Raises:
        ValidationException: invalid_email, password_required
        MalformedToken: client token shorter than the minimum
        InvalidCredentials: unknown email or wrong password
        AccountNotFound: account deleted mid sign-in
    """
    email = check_email(email)

    if not password:
        raise ValidationException(message="Password is required", code="password_required")

    if not client_token or len(client_token) < client_token_min_length:
        raise MalformedToken(client_token_min_length)

    try:
        user = await user_service.get_user_by_email(email)
    except PyMongoError as e:
        logger.error(f"Credential store lookup failed during sign-in: {e}")
        raise StoreUnavailable()

    if not user:
        logger.info("Sign-in failed: unknown email")
        raise InvalidCredentials()

    if not await run_in_threadpool(verify_secret, password, user.get("password", "")):
        logger.info(f"Sign-in failed: bad password for user {user['_id']}")
        raise InvalidCredentials()

    await session_manager.issue_session(str(user["_id"]), client_token)

    logger.info(f"User signed in: {user['_id']}")

    return {
        "message": "Signed in",
        "user": format_user_response(user),
    }


async def verify_pipeline(
    session_manager: SessionManager,
    user_id: str,
    client_token: str,
) -> dict:
    """
    Checks a (user id, client token) pair.

    Returns:
        dict with valid=True and public user profile

    Raises:
        CredentialsMissing: either field absent
        SessionInvalid: session does not verify
    """
    if not client_token or not user_id:
        raise CredentialsMissing()

    user = await session_manager.verify_session(user_id, client_token)

    return {
        "valid": True,
        "user": format_user_response(user),
    }


async def signout_pipeline(
    session_manager: SessionManager,
    user_id: str,
    client_token: str,
) -> dict:
    """
    Orchestrates sign-out.

    Returns:
        dict with success message

    Raises:
        ValidationException: either field absent
        NotFoundException: unknown account
        SessionInvalid: no stored session or token mismatch
    """
    if not client_token or not user_id:
        raise ValidationException(
            message="Client token and user id are required",
            code="client_token_and_user_id_required",
        )

    await session_manager.revoke_session(user_id, client_token)

    logger.info(f"User signed out: {user_id}")

    return {"message": "Signed out"}
