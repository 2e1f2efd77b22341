"""
Utilities module - API responses, exceptions and their handlers.
"""

from common.utils.responses import success_response, error_response
from common.utils.exceptions import (
    APIException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    ValidationException,
    InternalServerException,
    ServiceUnavailableException,
)
from common.utils.handlers import register_exception_handlers

__all__ = [
    "success_response",
    "error_response",
    "APIException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "ValidationException",
    "InternalServerException",
    "ServiceUnavailableException",
    "register_exception_handlers",
]
