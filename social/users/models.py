"""
Enumerations stored on user documents.
"""

from enum import Enum


class Role(str, Enum):
    """Account role; every account is created as USER."""
    USER = "user"
    ADMIN = "admin"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"
