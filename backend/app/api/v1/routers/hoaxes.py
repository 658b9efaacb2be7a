from fastapi import APIRouter, Depends

from app.api.v1.deps import (
    Pagination,
    get_pagination,
    json_body,
    require_hoax_author,
    resolve_principal,
)
from app.core.exceptions import ForbiddenError
from app.core.principal import BearerPrincipal, Principal
from app.models.user import User
from app.schemas.hoax import HoaxIn, HoaxPageOut
from app.services import hoax_service

router = APIRouter(tags=["hoaxes"])

@router.post("/hoaxes")
async def post_hoax(
    author: User = Depends(require_hoax_author),
    body: HoaxIn = Depends(json_body(HoaxIn)),
):
    """
    Submit a hoax as the authenticated user.

    Raises:
        AuthenticationError (401): no live bearer token (checked before the body)
        ValidationError (400): content shorter than 10 or longer than 5000 characters
    """
    await hoax_service.save(body.content, author)
    return {"message": "Hoax is saved"}

@router.get("/hoaxes", response_model=HoaxPageOut)
async def list_hoaxes(pagination: Pagination = Depends(get_pagination)):
    """Newest-first page of all hoaxes."""
    return await hoax_service.get_hoaxes(pagination.page, pagination.size)

@router.get("/users/{user_id}/hoaxes", response_model=HoaxPageOut)
async def list_user_hoaxes(user_id: int, pagination: Pagination = Depends(get_pagination)):
    """
    Newest-first page of one user's hoaxes.

    Raises:
        NotFoundError (404): unknown user
    """
    return await hoax_service.get_hoaxes(pagination.page, pagination.size, user_id)

@router.delete("/hoaxes/{hoax_id}")
async def delete_hoax(hoax_id: int, principal: Principal = Depends(resolve_principal)):
    """
    Raises:
        ForbiddenError (403): no live bearer token, or the hoax does not exist or belongs to someone else
    """
    if not isinstance(principal, BearerPrincipal):
        raise ForbiddenError(hoax_service.DELETE_FORBIDDEN)
    await hoax_service.delete(hoax_id, principal.user)
    return {"message": "Hoax is deleted"}
