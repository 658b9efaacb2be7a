"""
Pydantic schemas for authentication endpoints.
Defines request/response models for login.
"""
from typing import Optional

from pydantic import BaseModel

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    Missing fields are not validation errors: they simply fail authentication (401).
    """
    email: Optional[str] = None  # Login identifier
    password: Optional[str] = None  # Plain text, verified against the stored hash

class LoginResponse(BaseModel):
    """
    Response model for successful login.
    Returns basic user information and the session token for Bearer authentication.
    """
    id: int  # User unique identifier
    username: str  # Display name
    image: Optional[str] = None  # Profile image filename
    token: str  # Opaque session token
