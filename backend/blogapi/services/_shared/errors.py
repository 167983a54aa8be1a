"""
Errors raised by services and adapters.

Nothing here knows about HTTP. ``blogapi.core.errors`` maps each type to a
status code and an envelope.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Tell whether ``exc`` was raised by the named unique constraint.

    PostgreSQL quotes the constraint name. SQLite only names the column
    (``UNIQUE constraint failed: users.email``), so ``uq_<table>_<column>``
    names are also matched as ``<table>.<column>``.

    :param exc: Error raised on flush or commit.
    :param constraint_name: E.g. ``"uq_users_email"``.
    :rtype: bool
    """
    text = str(exc.orig if exc.orig is not None else exc).lower()
    name = constraint_name.lower()
    if name in text:
        return True
    if not name.startswith("uq_"):
        return False
    table, _, column = name.removeprefix("uq_").partition("_")
    return bool(column) and f"{table}.{column}" in text


class ServiceError(Exception):
    """Root of every error a service may raise on purpose."""


@dataclass(slots=True, eq=False)
class ValidationError(ServiceError):
    """
    Input broke a domain rule.

    :ivar messages: ``field -> [message, ...]`` for each failing field.
    """

    messages: dict[str, list[str]] = field(default_factory=dict)

    def __str__(self) -> str:
        return "Invalid " + (", ".join(sorted(self.messages)) or "input")


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """``entity`` identified by ``key`` does not exist."""

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} {self.key} does not exist"


@dataclass(slots=True, eq=False)
class ConflictError(ServiceError):
    """A uniqueness rule on ``entity`` would be broken; ``detail`` is client-safe."""

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"{self.entity}: {self.detail}"


class _MessageError(ServiceError):
    """Error carrying a client-safe ``message``."""

    default_message = "Service error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(_MessageError):
    """
    Credentials or a token were rejected.

    Messages stay generic so a response never reveals whether an email is
    registered.
    """

    default_message = "Unauthorized"


class InvalidTokenError(AuthError):
    """A token failed signature, expiry, claim or type checks."""

    default_message = "Invalid token"


class IssuanceError(_MessageError):
    """A token could not be signed, e.g. the signing key is missing."""

    default_message = "Could not create token"


class AuthorizationError(_MessageError):
    """The caller is authenticated but may not act on the resource."""

    default_message = "Forbidden"
