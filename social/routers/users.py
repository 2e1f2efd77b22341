"""
FastAPI router for User endpoints.

Profile lookups and updates behind the session gate.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import NotFoundException, success_response
from social.dependencies import get_user_service, require_auth, require_session
from social.schemas.user import ProfileUpdateRequest
from social.users import pipelines
from social.users.services.user_service import UserService, format_user_response

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", dependencies=[Depends(require_session)])
async def list_users(
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """List all users."""
    users = await user_service.list_users()
    return success_response({"users": [format_user_response(u) for u in users]})


@router.get("/me")
async def get_current_user(
    user: Annotated[dict, Depends(require_auth)],
):
    """Profile of the signed-in user."""
    return success_response({"user": format_user_response(user)})


@router.get("/{user_id}", dependencies=[Depends(require_session)])
async def get_user(
    user_id: str,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Profile of any user."""
    user = await user_service.get_public_user(user_id)
    if not user:
        raise NotFoundException(message="User not found", code="user_not_found")
    return success_response({"user": format_user_response(user)})


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    body: ProfileUpdateRequest,
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """
    Update a profile.

    Only provided fields will be updated (partial update).
    """
    result = await pipelines.update_profile_pipeline(
        user_service=user_service,
        current_user=user,
        user_id=user_id,
        updates=body.model_dump(exclude_unset=True),
    )
    return success_response(result)
