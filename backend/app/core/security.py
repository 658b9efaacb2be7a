"""
Security module for credentials.
Handles password hashing and generation of the random opaque tokens used for
sessions, account activation and password reset.
"""
import base64
import binascii
import secrets
from passlib.context import CryptContext

# Password hashing context
# Argon2 is a modern, secure password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)

def generate_token(length: int) -> str:
    """
    Generate a random hexadecimal string of exactly `length` characters.

    Session tokens use 32 characters, activation and reset tokens 16.
    """
    return secrets.token_hex((length + 1) // 2)[:length]

def decode_basic_credentials(encoded: str) -> tuple[str, str] | None:
    """
    Decode the payload of an `Authorization: Basic` header.

    Returns:
        (email, password), or None when the payload is not valid base64 of "email:password"
    """
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    email, sep, password = decoded.partition(":")
    if not sep:
        return None
    return email, password
