"""
Common library for reusable infrastructure components.

This package holds generic modules that carry no social-network logic:

- database: Async MongoDB connection (Motor + Beanie)
- auth: bcrypt secret hashing
- utils: Standard responses, exceptions and exception handlers
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import hash_secret, verify_secret
from common.utils import (
    success_response,
    error_response,
    APIException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    ValidationException,
    register_exception_handlers,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "hash_secret",
    "verify_secret",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "ValidationException",
    "register_exception_handlers",
    # Config
    "BaseAppSettings",
]
