"""
Request principal.

The `Authorization` header is resolved once per request into one of:
    Anonymous          - no usable credentials (including unknown/expired tokens)
    BearerPrincipal    - a live session token, resolved to its user
    BasicCandidate     - decoded `Basic` credentials, not yet checked

Routes match on the variant they accept.
"""
from dataclasses import dataclass
from typing import Union

from app.models.user import User


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class BearerPrincipal:
    user: User
    token: str


@dataclass(frozen=True)
class BasicCandidate:
    email: str
    password: str


Principal = Union[Anonymous, BearerPrincipal, BasicCandidate]

ANONYMOUS = Anonymous()
