"""
Pydantic schemas for user endpoints.
Defines request models for registration, profile update and password reset,
and the public user representation.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.validators import (
    check_email,
    check_password,
    check_profile_image,
    check_username,
    raise_if_invalid,
)


class UserCreateIn(BaseModel):
    """
    Request model for registration.
    Fields default to None so that a missing field reports its own message.
    """
    username: Optional[str] = Field(default=None, validate_default=True)
    email: Optional[str] = Field(default=None, validate_default=True)
    password: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("username")
    @classmethod
    def _username(cls, v):
        raise_if_invalid("username", check_username(v))
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        raise_if_invalid("email", check_email(v))
        return v

    @field_validator("password")
    @classmethod
    def _password(cls, v):
        raise_if_invalid("password", check_password(v))
        return v


class UserUpdateIn(BaseModel):
    """
    Request model for profile update.
    - username: required
    - image: optional base64 JPEG/PNG, at most 2MB decoded; omitted keeps the current image
    """
    username: Optional[str] = Field(default=None, validate_default=True)
    image: Optional[str] = None

    @field_validator("username")
    @classmethod
    def _username(cls, v):
        raise_if_invalid("username", check_username(v))
        return v

    @field_validator("image")
    @classmethod
    def _image(cls, v):
        raise_if_invalid("image", check_profile_image(v))
        return v


class PasswordResetRequestIn(BaseModel):
    email: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        # Null and malformed addresses share one message here
        if check_email(v) is not None:
            raise_if_invalid("email", "E-mail is not valid")
        return v


class PasswordUpdateIn(BaseModel):
    """
    Request model for password reset confirmation.
    The password is validated by the route after the reset token is checked.
    """
    passwordResetToken: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    """Public user representation."""
    id: int
    username: str
    email: str
    image: Optional[str] = None


class UserPageOut(BaseModel):
    content: List[UserOut]
    page: int
    size: int
    totalPages: int
