"""
FastAPI router for Admin endpoints.

Provides admin-only platform statistics.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response
from social.dependencies import get_user_service, require_admin, require_auth
from social.users.models import Gender
from social.users.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats")
async def get_admin_stats(
    user: Annotated[dict, Depends(require_auth)],
    admin: Annotated[dict, Depends(require_admin)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """
    Get admin dashboard statistics.
    """
    logger.info(f"Admin stats requested by {admin['_id']}")

    by_gender = await user_service.count_by_gender()

    return success_response({
        "totalUsers": await user_service.count_users(),
        "activeSessions": await user_service.count_active_sessions(),
        "usersByGender": {
            "female": by_gender[Gender.FEMALE.value],
            "male": by_gender[Gender.MALE.value],
            "other": by_gender[Gender.OTHER.value],
            "preferNotToSay": by_gender[Gender.PREFER_NOT_TO_SAY.value],
        },
        "averageAge": await user_service.average_age(),
    })
