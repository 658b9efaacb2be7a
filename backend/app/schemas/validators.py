"""
Field rules shared by request schemas and routes.

Each check returns the message of the first rule the value breaks, or None.
Schemas turn that into a pydantic error; routes that must run an
authorization check before validating (password reset) raise ValidationError.
"""
import base64
import binascii
import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic_core import PydanticCustomError

from app.services.file_service import is_supported_image

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).*$")
MAX_IMAGE_BYTES = 2 * 1024 * 1024


def check_username(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return "Username cannot be null"
    if not 4 <= len(value) <= 32:
        return "Must have min 4 and max 32 characters"
    return None


def check_email(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return "E-mail cannot be null"
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return "E-mail is not valid"
    return None


def check_password(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return "Password cannot be null"
    if len(value) < 6:
        return "Password must be at least 6 characters"
    if not PASSWORD_PATTERN.match(value):
        return "Password must have at least 1 uppercase, 1 lowercase letter and 1 number"
    return None


def check_hoax_content(value: Optional[str]) -> Optional[str]:
    if value is None or not 10 <= len(value) <= 5000:
        return "Hoax must be min 10 and max 5000 characters"
    return None


def check_profile_image(value: Optional[str]) -> Optional[str]:
    """Strict base64 payload (padding only at the end): size first, then file type."""
    if value is None:
        return None
    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return "Only JPEG or PNG files are allowed"
    if len(data) > MAX_IMAGE_BYTES:
        return "Your profile image cannot be bigger than 2MB"
    if not is_supported_image(data):
        return "Only JPEG or PNG files are allowed"
    return None


def raise_if_invalid(field: str, message: Optional[str]) -> None:
    """Raise a pydantic error carrying `message` verbatim (no "Value error," prefix)."""
    if message is not None:
        raise PydanticCustomError(f"{field}_invalid", message)
