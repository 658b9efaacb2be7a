"""
Pydantic schemas for hoax endpoints.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.user import UserOut
from app.schemas.validators import check_hoax_content, raise_if_invalid


class HoaxIn(BaseModel):
    """Request model for submitting a hoax (10-5000 characters)."""
    content: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("content")
    @classmethod
    def _content(cls, v):
        raise_if_invalid("content", check_hoax_content(v))
        return v


class HoaxOut(BaseModel):
    id: int
    content: str
    timestamp: int  # Epoch milliseconds
    user: UserOut  # Author


class HoaxPageOut(BaseModel):
    content: List[HoaxOut]
    page: int
    size: int
    totalPages: int
