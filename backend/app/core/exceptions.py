"""
Application error taxonomy and the FastAPI handlers that render it.

Every user-visible failure is rendered as:
    {"path": <request path>, "timestamp": <epoch ms>, "message": <stable message>}
and validation failures additionally carry "validationErrors": {field: message}.
"""
import logging
import time
from typing import Dict, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("uvicorn.error")


class AppError(Exception):
    """Base class for errors that map to an HTTP status and a stable message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """One message per field; the first failing rule wins."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation Failure"

    def __init__(self, errors: Dict[str, str]):
        super().__init__()
        self.errors = errors


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Incorrect credentials"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    """
    Raised when a freshly generated key collides with a stored one.
    Callers retry with a new key; it only reaches a client after retries run out.
    """

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UpstreamDeliveryError(AppError):
    """E-mail transport failure. The operation it was part of is rolled back."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "E-mail failure"


class InvalidActivationTokenError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "This account is either active or the token is invalid"


def _error_body(request: Request, message: str) -> dict:
    return {
        "path": request.url.path,
        "timestamp": int(time.time() * 1000),
        "message": message,
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    body = _error_body(request, exc.message)
    if isinstance(exc, ValidationError):
        body["validationErrors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body)


def first_error_per_field(errors: Sequence[dict]) -> Dict[str, str]:
    """
    Convert pydantic/FastAPI validation output into the field -> message map.
    Only the first error per field is kept.
    """
    fields: Dict[str, str] = {}
    for err in errors:
        loc = err.get("loc") or ("body",)
        fields.setdefault(str(loc[-1]), err.get("msg", "Invalid value"))
    return fields


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await app_error_handler(request, ValidationError(first_error_per_field(exc.errors())))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
