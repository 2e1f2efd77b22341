"""
FastAPI router for Auth system endpoints.

Sign-up, sign-in, token verification and sign-out.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from social.auth import pipelines
from social.auth.services.session_manager import SessionManager
from social.config import Settings
from social.dependencies import get_session_manager, get_settings, get_user_service
from social.schemas.auth import SessionRequest, SigninRequest, SignupRequest
from social.users.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=201)
async def signup(
    body: SignupRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Create an account. No session is started.
    """
    return await pipelines.signup_pipeline(
        user_service=user_service,
        email=body.email,
        password=body.password,
        name=body.name,
        age=body.age,
        gender=body.gender,
        icon=body.icon,
        password_min_length=settings.PASSWORD_MIN_LENGTH,
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
    )


@router.post("/signin")
async def signin(
    body: SigninRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Sign in with email and password, binding the client token as the
    account's session. Any previous session is replaced.
    """
    return await pipelines.signin_pipeline(
        user_service=user_service,
        session_manager=session_manager,
        email=body.email,
        password=body.password,
        client_token=body.clientToken,
        client_token_min_length=settings.CLIENT_TOKEN_MIN_LENGTH,
    )


@router.post("/verify")
async def verify(
    body: SessionRequest,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
):
    """
    Check whether a client token is the live session of a user.
    """
    return await pipelines.verify_pipeline(
        session_manager=session_manager,
        user_id=body.userId,
        client_token=body.clientToken,
    )


@router.post("/signout")
async def signout(
    body: SessionRequest,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
):
    """
    End the session. Requires the still-stored client token.
    """
    return await pipelines.signout_pipeline(
        session_manager=session_manager,
        user_id=body.userId,
        client_token=body.clientToken,
    )
