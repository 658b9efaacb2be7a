from fastapi import APIRouter, Depends

from app.api.v1.deps import (
    Pagination,
    get_pagination,
    get_user_service,
    json_body,
    registration_body,
    require_owner_for_delete,
    require_owner_for_update,
    resolve_principal,
)
from app.core.principal import BearerPrincipal, Principal
from app.models.user import User
from app.schemas.user import (
    PasswordResetRequestIn,
    PasswordUpdateIn,
    UserCreateIn,
    UserOut,
    UserPageOut,
    UserUpdateIn,
)
from app.services.user_service import UserService, user_to_dict

router = APIRouter(tags=["users"])

# ===== Registration & activation =====
@router.post("/users")
async def register(
    body: UserCreateIn = Depends(registration_body),
    users: UserService = Depends(get_user_service),
):
    """
    Register a new (inactive) user and send the activation mail.

    Returns:
        dict: {"message": "User created"}

    Raises:
        ValidationError (400): field rules or "E-mail in use"
        UpstreamDeliveryError (502): activation mail could not be sent; nothing is saved
    """
    await users.register(body.username, body.email, body.password)
    return {"message": "User created"}

@router.post("/users/token/{token}")
async def activate(token: str, users: UserService = Depends(get_user_service)):
    """
    Activate the account owning `token`.

    Raises:
        InvalidActivationTokenError (400): unknown token or account already active
    """
    await users.activate(token)
    return {"message": "Account is activated"}

# ===== Reading =====
@router.get("/users", response_model=UserPageOut)
async def list_users(
    pagination: Pagination = Depends(get_pagination),
    principal: Principal = Depends(resolve_principal),
    users: UserService = Depends(get_user_service),
):
    """
    Paginated list of active users. An authenticated caller does not see itself.
    """
    exclude_id = principal.user.id if isinstance(principal, BearerPrincipal) else None
    return await users.list_users(pagination.page, pagination.size, exclude_id)

@router.get("/users/{user_id}", response_model=UserOut)
async def get_user(user_id: int, users: UserService = Depends(get_user_service)):
    """
    Raises:
        NotFoundError (404): no active user with this id
    """
    return user_to_dict(await users.get_user(user_id))

# ===== Owner-only mutation =====
@router.put("/users/{user_id}", response_model=UserOut)
async def update_user(
    owner: User = Depends(require_owner_for_update),
    body: UserUpdateIn = Depends(json_body(UserUpdateIn)),
    users: UserService = Depends(get_user_service),
):
    """
    Update the caller's own username and profile image.

    Accepts a live bearer token or Basic credentials of the target user.

    Returns:
        dict: id, username, email and image

    Raises:
        ForbiddenError (403): not the owner, or an invalid/expired token
        ValidationError (400): username or image rules
    """
    user = await users.update(owner, body.username, body.image)
    return user_to_dict(user)

@router.delete("/users/{user_id}")
async def delete_user(
    owner: User = Depends(require_owner_for_delete),
    users: UserService = Depends(get_user_service),
):
    """
    Delete the caller's own account. All of its session tokens are removed too.

    Raises:
        ForbiddenError (403): not the owner, or an invalid/expired token
    """
    await users.delete(owner)
    return {"message": "User is deleted"}

# ===== Password reset =====
@router.post("/user/password")
async def password_reset_request(
    body: PasswordResetRequestIn = Depends(json_body(PasswordResetRequestIn)),
    users: UserService = Depends(get_user_service),
):
    """
    Start a password reset: store a reset token and mail it to the user.

    Raises:
        ValidationError (400): malformed e-mail
        NotFoundError (404): unknown e-mail
        UpstreamDeliveryError (502): reset mail could not be sent; the reset token is not kept
    """
    await users.request_password_reset(body.email)
    return {"message": "Check your e-mail for resetting your password"}

@router.put("/user/password")
async def password_update(
    body: PasswordUpdateIn = Depends(json_body(PasswordUpdateIn)),
    users: UserService = Depends(get_user_service),
):
    """
    Finish a password reset with the mailed token.

    Raises:
        ForbiddenError (403): unknown reset token (checked before the password rules)
        ValidationError (400): password rules
    """
    await users.reset_password(body.passwordResetToken, body.password)
    return {"message": "Password is updated"}
