"""
User system pipeline functions.

Stateless orchestration logic for profile operations, plus the field
checks shared with sign-up.
"""

import logging
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email

from common.utils.exceptions import ForbiddenException, NotFoundException, ValidationException
from social.users.models import Gender, Role
from social.users.services.user_service import UserService, format_user_response, normalize_email

logger = logging.getLogger(__name__)

MIN_AGE = 0
MAX_AGE = 150


def check_email(email) -> str:
    """Validate an email address and return it normalized."""
    if not email or not isinstance(email, str):
        raise ValidationException(message="Invalid email address", code="invalid_email")
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValidationException(message="Invalid email address", code="invalid_email")
    return normalize_email(email)


def check_age(age: Optional[int]) -> Optional[int]:
    if age is not None and not MIN_AGE <= age <= MAX_AGE:
        raise ValidationException(message="Invalid age", code="invalid_age")
    return age


def check_gender(gender: Optional[str]) -> Optional[str]:
    if not gender:
        return None
    gender = gender.lower()
    if gender not in {g.value for g in Gender}:
        raise ValidationException(message="Invalid gender", code="invalid_gender")
    return gender


async def update_profile_pipeline(
    user_service: UserService,
    current_user: dict,
    user_id: str,
    updates: Dict[str, Any],
) -> dict:
    """
    Update a user's profile (partial update).

    Only the account owner or an admin may edit a profile. Password and
    session fields cannot be changed here.

    Args:
        user_service: For profile updates
        current_user: Signed-in user resolved by the auth gate
        user_id: Account being edited
        updates: Fields provided by the client

    Returns:
        dict with the updated public profile

    Raises:
        ForbiddenException: editing someone else's profile without admin role
        ValidationException: invalid_email, name_required, invalid_age, invalid_gender
        ConflictException: email_taken
        NotFoundException: user_not_found
    """
    is_owner = str(current_user["_id"]) == user_id
    if not is_owner and current_user.get("role") != Role.ADMIN.value:
        logger.info(f"User {current_user['_id']} denied editing profile {user_id}")
        raise ForbiddenException(message="Cannot edit another user's profile", code="forbidden")

    changes = {}
    if "email" in updates:
        changes["email"] = check_email(updates["email"])
    if "name" in updates:
        name = updates["name"]
        if not name or not name.strip():
            raise ValidationException(message="Name is required", code="name_required")
        changes["name"] = name.strip()
    if "age" in updates:
        changes["age"] = check_age(updates["age"])
    if "gender" in updates:
        changes["gender"] = check_gender(updates["gender"])
    if "icon" in updates:
        icon = updates["icon"]
        changes["icon"] = icon.strip() if icon and icon.strip() else None

    user = await user_service.update_profile(user_id, changes)
    if not user:
        raise NotFoundException(message="User not found", code="user_not_found")

    return {"user": format_user_response(user)}
