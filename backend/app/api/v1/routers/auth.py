from fastapi import APIRouter, Depends

from app.api.v1.deps import get_user_service, json_body, resolve_principal
from app.core.principal import BearerPrincipal, Principal
from app.schemas.auth import LoginRequest, LoginResponse
from app.services.user_service import UserService

router = APIRouter(tags=["auth"])

@router.post("/auth", response_model=LoginResponse)
async def login(
    payload: LoginRequest = Depends(json_body(LoginRequest)),
    users: UserService = Depends(get_user_service),
):
    """
    Authenticate user and issue a session token.

    Validates the e-mail/password pair and creates a new opaque token on every
    successful login (earlier tokens of the same user stay valid). The token is
    then presented as `Authorization: Bearer <token>`.

    Args:
        payload: Request body containing email and password

    Returns:
        dict: id, username, image and token

    Raises:
        AuthenticationError (401): unknown e-mail or wrong password (also when a field is missing)
        ForbiddenError (403): the account has not been activated
    """
    user, token = await users.login(payload.email, payload.password)
    return {"id": user.id, "username": user.username, "image": user.image, "token": token}

@router.post("/logout")
async def logout(
    principal: Principal = Depends(resolve_principal),
    users: UserService = Depends(get_user_service),
):
    """
    Log out by deleting the presented bearer token.

    Always succeeds, also for requests without (or with an unknown) token.
    """
    if isinstance(principal, BearerPrincipal):
        await users.logout(principal.token)
    return {"message": "Logout success"}
