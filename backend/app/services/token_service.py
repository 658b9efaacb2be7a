"""
Token Service

Issues session tokens, validates them with a sliding expiration window, and
removes them on logout, account deletion or expiry.

Expiry is enforced lazily by `verify_token` (an expired token is deleted the
moment it is presented) and, for tokens that are never presented again, by the
periodic sweep in `token_cleanup.py`, which calls `cleanup_expired`.
"""
import datetime as dt
import logging
from typing import Callable, Optional

from tortoise.exceptions import IntegrityError

from app.config import settings
from app.core.exceptions import ConflictError
from app.core.security import generate_token
from app.models.user import User
from app.services.token_store import TokenStore, TortoiseTokenStore

logger = logging.getLogger("uvicorn.error")

TOKEN_LENGTH = 32
TOKEN_EXPIRY = dt.timedelta(days=settings.token_expiry_days)


def utc_now() -> dt.datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        dt.datetime: Current UTC datetime with timezone awareness
    """
    return dt.datetime.now(dt.timezone.utc)


class TokenService:
    """
    Session token lifecycle.

    Token states:
        Created -> Active (each use within the window resets the timer)
        Active -> Expired (idle longer than `expiry`) -> Deleted (on next use or sweep)
        Active -> Deleted (logout, account deletion, password reset)
    """

    def __init__(
        self,
        store: TokenStore,
        expiry: dt.timedelta = TOKEN_EXPIRY,
        clock: Callable[[], dt.datetime] = utc_now,
    ):
        self.store = store
        self.expiry = expiry
        self.clock = clock

    async def create_token(self, user: User) -> str:
        """
        Issue a new token for `user`.

        Raises:
            ConflictError: the generated token already exists; retry with a fresh one
        """
        token = generate_token(TOKEN_LENGTH)
        try:
            await self.store.put(token, user.id, self.clock())
        except IntegrityError as e:
            raise ConflictError("Token collision") from e
        return token

    async def verify_token(self, token: str) -> Optional[User]:
        """
        Resolve a token to its owning user.

        Returns None (never raises) when the token is unknown or expired; an
        expired token is deleted. A live token has its last_used_at moved to now.
        """
        if not token:
            return None
        stored = await self.store.get(token)
        if stored is None:
            return None

        now = self.clock()
        cutoff = now - self.expiry
        if stored.last_used_at < cutoff:
            await self.store.delete_if_expired(token, cutoff)
            logger.info("[token] expired token purged for user id=%s", stored.user_id)
            return None

        if not await self.store.touch(token, now):
            # No row updated: either deleted since `get` (logout, sweep) or
            # already refreshed by a request carrying a later `now`
            if await self.store.get(token) is None:
                return None
        return stored.user

    async def delete_token(self, token: str) -> None:
        """Idempotent: deleting an unknown token is not an error."""
        if token:
            await self.store.delete(token)

    async def delete_tokens_for_user(self, user_id: int) -> int:
        return await self.store.delete_for_user(user_id)

    async def cleanup_expired(self) -> int:
        """Delete every token idle longer than the expiry window. Returns the count."""
        cutoff = self.clock() - self.expiry
        return await self.store.delete_expired(cutoff)


# Application-wide instance; routes obtain it through `get_token_service`
token_service = TokenService(TortoiseTokenStore())
