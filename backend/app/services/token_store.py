"""
Token Store

Persisted mapping of opaque token -> {owning user, last used timestamp}.
The store is the only place that writes `last_used_at`; every write is
conditional on the stored timestamp so that a refresh and a sweep racing on
the same row can never delete a token that was just refreshed.
"""
import datetime as dt
from abc import ABC, abstractmethod
from typing import Optional

from app.models.token import Token


class TokenStore(ABC):
    """Token Store Abstract Base Class"""

    @abstractmethod
    async def get(self, token: str) -> Optional[Token]:
        """Return the stored token with its owning user loaded, or None."""
        pass

    @abstractmethod
    async def put(self, token: str, user_id: int, last_used_at: dt.datetime) -> None:
        """
        Insert a new token.

        Raises:
        - tortoise.exceptions.IntegrityError: the token already exists
        """
        pass

    @abstractmethod
    async def touch(self, token: str, now: dt.datetime) -> bool:
        """
        Set last_used_at to `now` unless the stored value is already newer.

        Returns:
            False when no row was updated (token gone, or refreshed past `now`)
        """
        pass

    @abstractmethod
    async def delete(self, token: str) -> int:
        pass

    @abstractmethod
    async def delete_if_expired(self, token: str, cutoff: dt.datetime) -> int:
        """Delete the token only if last_used_at is still older than `cutoff`."""
        pass

    @abstractmethod
    async def delete_for_user(self, user_id: int) -> int:
        pass

    @abstractmethod
    async def delete_expired(self, cutoff: dt.datetime) -> int:
        """Range delete of every token with last_used_at older than `cutoff`."""
        pass


class TortoiseTokenStore(TokenStore):
    """Token store backed by the `tokens` table."""

    async def get(self, token: str) -> Optional[Token]:
        return await Token.filter(token=token).select_related("user").first()

    async def put(self, token: str, user_id: int, last_used_at: dt.datetime) -> None:
        await Token.create(token=token, user_id=user_id, last_used_at=last_used_at)

    async def touch(self, token: str, now: dt.datetime) -> bool:
        updated = await Token.filter(token=token, last_used_at__lte=now).update(last_used_at=now)
        return updated > 0

    async def delete(self, token: str) -> int:
        return await Token.filter(token=token).delete()

    async def delete_if_expired(self, token: str, cutoff: dt.datetime) -> int:
        return await Token.filter(token=token, last_used_at__lt=cutoff).delete()

    async def delete_for_user(self, user_id: int) -> int:
        return await Token.filter(user_id=user_id).delete()

    async def delete_expired(self, cutoff: dt.datetime) -> int:
        return await Token.filter(last_used_at__lt=cutoff).delete()
