"""
Pydantic models for User system request validation.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdateRequest(BaseModel):
    """Partial profile update. Unknown fields (password, token...) are rejected."""
    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = Field(None, description="male | female | other | prefer_not_to_say")
    icon: Optional[str] = None
