from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

from blogapi.services._shared.errors import InvalidTokenError


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """
    Freshly signed access token.

    :ivar token: Encoded token.
    :ivar expires_in: Configured access lifetime in seconds (informational).
    """

    token: str
    expires_in: int


@dataclass(frozen=True, slots=True)
class VerifiedToken:
    """
    Result of a successful verification.

    :ivar user_id: Subject of the token.
    :ivar claims: Full decoded claim set.
    """

    user_id: int
    claims: dict[str, Any] = field(default_factory=dict)

    @property
    def is_refresh(self) -> bool:
        return bool(self.claims.get("refresh"))


class TokenProvider(Protocol):
    """Port for issuing and verifying signed tokens.

    ``verify`` performs no database lookup: whether a refresh token is still
    the stored one is decided by the auth service.
    """

    def issue_access_token(self, user_id: int) -> IssuedToken: ...

    def issue_refresh_token(self, user_id: int) -> str: ...

    def verify(self, token: str, *, refresh: bool | None = None) -> VerifiedToken: ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests.

    Tokens are opaque strings remembered in memory; :meth:`expire` marks one
    as expired so callers can exercise the rejection path.
    """

    def __init__(
        self,
        *,
        access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(days=14),
    ) -> None:
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def _mk(self, *, user_id: int, ttype: str, ttl: timedelta) -> str:
        self._seq += 1
        now = datetime.now(tz=UTC)
        token = f"{ttype}.{user_id}.{self._seq}"
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "type": ttype,
            "jti": f"jti-{self._seq}",
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        if ttype == "refresh":
            payload["refresh"] = True
        self._issued[token] = payload
        return token

    def issue_access_token(self, user_id: int) -> IssuedToken:
        token = self._mk(user_id=user_id, ttype="access", ttl=self.access_ttl)
        return IssuedToken(token=token, expires_in=int(self.access_ttl.total_seconds()))

    def issue_refresh_token(self, user_id: int) -> str:
        return self._mk(user_id=user_id, ttype="refresh", ttl=self.refresh_ttl)

    def expire(self, token: str) -> None:
        self._issued[token]["exp"] = 0

    def verify(self, token: str, *, refresh: bool | None = None) -> VerifiedToken:
        payload = self._issued.get(token)
        if payload is None:
            raise InvalidTokenError()
        if payload["exp"] <= int(datetime.now(tz=UTC).timestamp()):
            raise InvalidTokenError("Token has expired")
        if refresh is not None and bool(payload.get("refresh")) is not refresh:
            raise InvalidTokenError("Wrong token type")
        return VerifiedToken(user_id=int(payload["sub"]), claims=dict(payload))
