"""
Hoax Service

Posting, newest-first pagination (optionally restricted to one author) and
author-only deletion of hoaxes.
"""
import time
from typing import Optional

from app.core.exceptions import ForbiddenError, NotFoundError
from app.models.hoax import Hoax
from app.models.user import User
from app.services.user_service import page_to_dict, user_to_dict

DELETE_FORBIDDEN = "You are not authorized to delete this hoax"


def hoax_to_dict(h: Hoax) -> dict:
    return {
        "id": h.id,
        "content": h.content,
        "timestamp": h.timestamp,
        "user": user_to_dict(h.user),
    }


async def save(content: str, user: User) -> Hoax:
    return await Hoax.create(
        content=content,
        timestamp=int(time.time() * 1000),
        user=user,
    )


async def get_hoaxes(page: int, size: int, user_id: Optional[int] = None) -> dict:
    """
    Stable newest-first page; ties on timestamp are broken by id.

    Raises:
        NotFoundError: `user_id` given but no such user
    """
    qs = Hoax.all()
    if user_id is not None:
        if not await User.filter(id=user_id).exists():
            raise NotFoundError("User not found")
        qs = qs.filter(user_id=user_id)
    total = await qs.count()
    rows = await qs.select_related("user").order_by("-timestamp", "-id").offset(page * size).limit(size)
    return page_to_dict([hoax_to_dict(h) for h in rows], page, size, total)


async def delete(hoax_id: int, user: User) -> None:
    hoax = await Hoax.get_or_none(id=hoax_id, user_id=user.id)
    if not hoax:
        raise ForbiddenError(DELETE_FORBIDDEN)
    await hoax.delete()
