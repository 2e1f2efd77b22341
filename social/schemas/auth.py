"""
Pydantic models for Auth system request/response validation.

Fields are optional at the schema level; the auth pipelines check them so
every rejection carries its specific error code.
"""

from typing import Optional
from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    """Request body for account creation."""
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = Field(None, description="male | female | other | prefer_not_to_say")
    icon: Optional[str] = None


class SigninRequest(BaseModel):
    """Request body for sign-in."""
    email: Optional[str] = None
    password: Optional[str] = None
    clientToken: Optional[str] = Field(
        None,
        description="Random token generated by the client (>= 32 chars, typically 64 hex chars)",
    )


class SessionRequest(BaseModel):
    """Request body for verify and sign-out."""
    clientToken: Optional[str] = None
    userId: Optional[str] = None
