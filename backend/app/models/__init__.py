"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account, activation and profile model
- Token: Session token (bearer credential) owned by a User
- Hoax: Short text post owned by a User
"""
from .user import User
from .token import Token
from .hoax import Hoax
