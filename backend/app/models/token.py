"""
Database model for session tokens.
An opaque random string issued on login and presented as `Authorization: Bearer <token>`.
"""
from tortoise import fields, models

class Token(models.Model):
    """
    Session token database model.

    - token: opaque random hex string, primary key
    - user: owning user; tokens are removed together with the user
    - last_used_at: refreshed on every successful use (sliding expiration)
    """
    token = fields.CharField(max_length=32, pk=True)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="tokens",
        on_delete=fields.CASCADE,
    )
    last_used_at = fields.DatetimeField(index=True)  # Scanned by the cleanup sweep

    class Meta:
        table = "tokens"
