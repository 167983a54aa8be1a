# blogapi/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blogapi.models.user import User

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param name: Display name.
    :type name: str
    :param email: Email address (normalized by the service).
    :type email: str
    :param password: Raw password, hashed before persistence.
    :type password: str
    """

    name: str
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Value of the ``Refresh-Token`` header, if any.
    :type refresh_token: str | None
    """

    refresh_token: str | None = field(default=None, repr=False)


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT, now the only one accepted.
    :type refresh_token: str
    :param expires_in: Access token lifetime in seconds (informational).
    :type expires_in: int
    :param token_type: Always ``"bearer"``.
    :type token_type: str
    """

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """Public projection of a user. Never includes the password hash."""

    id: int
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: User) -> UserPublicOut:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthSessionConfig:
    """
    Session policy.

    :param verify_refresh_signature: After a refresh token matches the stored
        value, also require a valid signature, expiry and ``refresh`` claim.
    :type verify_refresh_signature: bool
    """

    verify_refresh_signature: bool = True
