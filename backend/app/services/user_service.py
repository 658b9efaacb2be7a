"""
User Service

Registration and activation, login/logout, profile update and deletion, and
the password reset flow. Session tokens go through the Token Service; the
activation and reset tokens are separate single-use values kept on the user row.
"""
import logging
import math
from typing import Optional

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from app.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InvalidActivationTokenError,
    NotFoundError,
    ValidationError,
)
from app.core.principal import BasicCandidate
from app.core.security import generate_token, hash_password, verify_password
from app.models.hoax import Hoax
from app.models.user import User
from app.schemas.validators import check_password
from app.services.file_service import delete_profile_image, save_profile_image
from app.services.mail_service import MailService
from app.services.token_service import TokenService

logger = logging.getLogger("uvicorn.error")

ACTIVATION_TOKEN_LENGTH = 16
TOKEN_CREATE_ATTEMPTS = 3

PASSWORD_RESET_FORBIDDEN = (
    "You are not authorized to update your password. "
    "Please follow the password reset steps again."
)


def user_to_dict(u: User) -> dict:
    """
    Public representation of a user (no credentials, no tokens).
    """
    return {
        "id": u.id,
        "username": u.username,
        "email": u.email,
        "image": u.image,
    }


def page_to_dict(items: list, page: int, size: int, total: int) -> dict:
    return {
        "content": items,
        "page": page,
        "size": size,
        "totalPages": math.ceil(total / size),
    }


class UserService:
    def __init__(self, token_service: TokenService, mail_service: MailService):
        self.token_service = token_service
        self.mail_service = mail_service

    # ---------------- registration ----------------
    async def register(self, username: str, email: str, password: str) -> User:
        """
        Create an inactive user and send the activation mail.

        The user row and the mail are one unit: if delivery fails the
        transaction is rolled back and UpstreamDeliveryError propagates.
        """
        if await User.filter(email=email).exists():
            raise ValidationError({"email": "E-mail in use"})
        try:
            async with in_transaction() as conn:
                user = await User.create(
                    username=username,
                    email=email,
                    password=hash_password(password),
                    activation_token=generate_token(ACTIVATION_TOKEN_LENGTH),
                    using_db=conn,
                )
                await self.mail_service.send_account_activation(user)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same address
            raise ValidationError({"email": "E-mail in use"})
        logger.info("[user] registered id=%s", user.id)
        return user

    async def activate(self, token: str) -> None:
        user = await User.get_or_none(activation_token=token) if token else None
        if not user:
            raise InvalidActivationTokenError()
        user.inactive = False
        user.activation_token = None
        await user.save()

    # ---------------- authentication ----------------
    async def login(self, email: Optional[str], password: Optional[str]) -> tuple[User, str]:
        """
        Returns:
            (user, session token)

        Raises:
            AuthenticationError (401): unknown e-mail or wrong password
            ForbiddenError (403): correct credentials for an inactive account
        """
        user = await User.get_or_none(email=email) if email else None
        if not user or not password or not verify_password(password, user.password):
            raise AuthenticationError("Incorrect credentials")
        if user.inactive:
            raise ForbiddenError("Account is inactive")
        return user, await self._issue_token(user)

    async def _issue_token(self, user: User) -> str:
        for attempt in range(1, TOKEN_CREATE_ATTEMPTS + 1):
            try:
                return await self.token_service.create_token(user)
            except ConflictError:
                logger.warning("[user] token collision for id=%s (attempt %s)", user.id, attempt)
        raise ConflictError("Could not issue a session token")

    async def logout(self, token: Optional[str]) -> None:
        await self.token_service.delete_token(token)

    async def authenticate_basic(self, candidate: BasicCandidate) -> Optional[User]:
        """Check Basic credentials; only active users with a matching password qualify."""
        user = await User.get_or_none(email=candidate.email)
        if not user or user.inactive:
            return None
        if not verify_password(candidate.password, user.password):
            return None
        return user

    # ---------------- profile ----------------
    async def get_user(self, user_id: int) -> User:
        user = await User.get_or_none(id=user_id, inactive=False)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def list_users(self, page: int, size: int, exclude_id: Optional[int] = None) -> dict:
        """Active users only, ordered by id; the caller is left out of the list."""
        qs = User.filter(inactive=False)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        total = await qs.count()
        rows = await qs.order_by("id").offset(page * size).limit(size)
        return page_to_dict([user_to_dict(u) for u in rows], page, size, total)

    async def update(self, user: User, username: str, image: Optional[str]) -> User:
        """
        Update username and, if an image is given, replace the profile image.
        Without an image the current one is kept.
        """
        user.username = username
        old_image = user.image
        if image:
            user.image = save_profile_image(image)
        await user.save()
        if image:
            delete_profile_image(old_image)
        return user

    async def delete(self, user: User) -> None:
        """Remove the user together with its tokens, hoaxes and profile image."""
        await self.token_service.delete_tokens_for_user(user.id)
        await Hoax.filter(user_id=user.id).delete()
        image = user.image
        await user.delete()
        delete_profile_image(image)
        logger.info("[user] deleted id=%s", user.id)

    # ---------------- password reset ----------------
    async def request_password_reset(self, email: str) -> None:
        user = await User.get_or_none(email=email)
        if not user:
            raise NotFoundError("E-mail not found")
        async with in_transaction() as conn:
            user.password_reset_token = generate_token(ACTIVATION_TOKEN_LENGTH)
            await user.save(using_db=conn)
            await self.mail_service.send_password_reset(user)

    async def reset_password(self, reset_token: Optional[str], password: Optional[str]) -> None:
        """
        Consume a reset token and set a new password.

        The token is checked before the password rules. A successful reset also
        activates the account and logs out every session of the user.
        """
        user = await User.get_or_none(password_reset_token=reset_token) if reset_token else None
        if not user:
            raise ForbiddenError(PASSWORD_RESET_FORBIDDEN)
        message = check_password(password)
        if message:
            raise ValidationError({"password": message})
        user.password = hash_password(password)
        user.password_reset_token = None
        user.inactive = False
        user.activation_token = None
        await user.save()
        await self.token_service.delete_tokens_for_user(user.id)
