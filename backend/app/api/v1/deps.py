# app/api/v1/deps.py
from dataclasses import dataclass
from typing import Any, Callable, Type, TypeVar

from fastapi import Depends, Header, Query, Request
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from app.core.exceptions import (
    AuthenticationError,
    ForbiddenError,
    ValidationError,
    first_error_per_field,
)
from app.core.principal import ANONYMOUS, BasicCandidate, BearerPrincipal, Principal
from app.core.security import decode_basic_credentials
from app.models.user import User
from app.schemas.user import UserCreateIn
from app.services.mail_service import MailService, mail_service
from app.services.token_service import TokenService, token_service
from app.services.user_service import UserService

MAX_PAGE_SIZE = 10

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_token_service() -> TokenService:
    return token_service


def get_mail_service() -> MailService:
    return mail_service


def get_user_service(
    tokens: TokenService = Depends(get_token_service),
    mail: MailService = Depends(get_mail_service),
) -> UserService:
    return UserService(tokens, mail)


async def resolve_principal(
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    """
    FastAPI dependency resolving the `Authorization` header to a Principal.

    Installed on the whole application, so every request that presents a live
    bearer token refreshes it, whether or not the route needs authentication.
    FastAPI caches dependencies per request: routes that also depend on this
    function receive the same value and the token is verified only once.

    Schemes:
        Bearer <token>               -> BearerPrincipal, or Anonymous if unknown/expired
        Basic <base64(email:pass)>   -> BasicCandidate (credentials checked by the route)
        anything else / missing      -> Anonymous

    Never raises for bad credentials; routes decide whether a principal is required.
    """
    if not authorization:
        return ANONYMOUS
    scheme, _, value = authorization.partition(" ")
    scheme = scheme.lower()
    value = value.strip()

    if scheme == "bearer" and value:
        user = await tokens.verify_token(value)
        if user is not None:
            return BearerPrincipal(user=user, token=value)
        return ANONYMOUS

    if scheme == "basic" and value:
        creds = decode_basic_credentials(value)
        if creds is not None:
            return BasicCandidate(email=creds[0], password=creds[1])

    return ANONYMOUS


async def _owner_or_none(
    user_id: int,
    principal: Principal,
    users: UserService,
) -> User | None:
    if isinstance(principal, BearerPrincipal):
        owner = principal.user
    elif isinstance(principal, BasicCandidate):
        owner = await users.authenticate_basic(principal)
    else:
        owner = None
    if owner is None or owner.id != user_id:
        return None
    return owner


async def require_owner_for_update(
    user_id: int,
    principal: Principal = Depends(resolve_principal),
    users: UserService = Depends(get_user_service),
) -> User:
    """
    Resolve the user that may update `user_id`: a live bearer token of that
    user, or Basic credentials of that (active) user. Runs before the request
    body is validated, so an unauthorized caller always gets 403.

    Raises:
        ForbiddenError (403): no principal, invalid/expired token, wrong credentials or another user
    """
    owner = await _owner_or_none(user_id, principal, users)
    if owner is None:
        raise ForbiddenError("You are not authorized to update user")
    return owner


async def require_owner_for_delete(
    user_id: int,
    principal: Principal = Depends(resolve_principal),
    users: UserService = Depends(get_user_service),
) -> User:
    owner = await _owner_or_none(user_id, principal, users)
    if owner is None:
        raise ForbiddenError("You are not authorized to delete user")
    return owner


async def require_hoax_author(principal: Principal = Depends(resolve_principal)) -> User:
    """
    Raises:
        AuthenticationError (401): the request carries no live bearer token
    """
    if not isinstance(principal, BearerPrincipal):
        raise AuthenticationError("You are not authorized to post hoax")
    return principal.user


@dataclass
class Pagination:
    page: int
    size: int


def _to_int(raw: str | None, default: int) -> int:
    try:
        return int(raw) if raw is not None else default
    except ValueError:
        return default


def get_pagination(
    page: str | None = Query(default=None),
    size: str | None = Query(default=None),
) -> Pagination:
    """
    Lenient paging parameters: bad or negative `page` -> 0,
    bad `size` or one outside 1..10 -> 10.
    """
    p = _to_int(page, 0)
    s = _to_int(size, MAX_PAGE_SIZE)
    if p < 0:
        p = 0
    if s < 1 or s > MAX_PAGE_SIZE:
        s = MAX_PAGE_SIZE
    return Pagination(page=p, size=s)


async def _read_json_object(request: Request) -> dict[str, Any]:
    """Request body as a JSON object; a missing or malformed body reads as `{}`."""
    try:
        data = await request.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _validate(model: Type[ModelT], data: dict[str, Any]) -> tuple[ModelT | None, dict[str, str]]:
    try:
        return model.model_validate(data), {}
    except SchemaValidationError as e:
        return None, first_error_per_field(e.errors())


def json_body(model: Type[ModelT]) -> Callable:
    """
    Dependency factory parsing the request body into `model`.

    Every field reports its own message, also when the body is absent, so
    clients see "Username cannot be null" rather than a missing body. Declare
    it after any authorization dependency: dependencies run in order.

    Raises:
        ValidationError (400): first failing rule per field
    """

    async def _parse(request: Request) -> ModelT:
        body, errors = _validate(model, await _read_json_object(request))
        if errors:
            raise ValidationError(errors)
        return body

    return _parse


async def registration_body(request: Request) -> UserCreateIn:
    """
    Registration body with the e-mail uniqueness rule folded into the field
    errors, so a taken address is reported next to the other failures.
    """
    data = await _read_json_object(request)
    body, errors = _validate(UserCreateIn, data)
    email = data.get("email")
    if "email" not in errors and isinstance(email, str) and await User.filter(email=email).exists():
        errors["email"] = "E-mail in use"
    if errors:
        raise ValidationError(errors)
    return body
