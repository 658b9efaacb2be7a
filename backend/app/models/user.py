"""
Database model for users.
Represents a user account in the system, containing authentication credentials,
activation state and profile information.
"""
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Tokens (one-to-many, via related_name="tokens"), cascade on delete
    - Has many Hoaxes (one-to-many, via related_name="hoaxes"), cascade on delete

    Lifecycle:
    - Created inactive with an activation token
    - Activated by consuming that token (token cleared, inactive -> False)
    """
    id = fields.IntField(pk=True)  # Primary key: assigned on creation
    username = fields.CharField(max_length=32)  # Display name (4-32 characters)
    email = fields.CharField(max_length=256, unique=True, index=True)  # Login identifier (must be unique)
    password = fields.CharField(max_length=255)  # Hashed password (argon2, never plain text)
    inactive = fields.BooleanField(default=True)  # True until the activation token is consumed
    activation_token = fields.CharField(max_length=32, null=True)  # Cleared on activation
    password_reset_token = fields.CharField(max_length=32, null=True)  # Set by a reset request, cleared on reset
    image = fields.CharField(max_length=64, null=True)  # Profile image filename (under the profile folder)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name
