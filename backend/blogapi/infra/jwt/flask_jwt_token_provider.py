# blogapi/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from blogapi.services._shared.errors import InvalidTokenError, IssuanceError
from blogapi.services._shared.ports import IssuedToken, TokenProvider, VerifiedToken

REFRESH_CLAIM = "refresh"
REQUIRED_CLAIMS = ("sub", "iat", "exp")


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Access and refresh tokens are HS256 JWTs (``JWT_ALGORITHM``) whose subject
    is the user id as a string. Refresh tokens also carry ``refresh: true``.
    Lifetimes come from ``JWT_ACCESS_TOKEN_EXPIRES`` and
    ``JWT_REFRESH_TOKEN_EXPIRES``.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def _access_ttl(self) -> timedelta:
        ttl = current_app.config.get("JWT_ACCESS_TOKEN_EXPIRES", timedelta(hours=1))
        if isinstance(ttl, int | float):
            ttl = timedelta(seconds=ttl)
        return cast(timedelta, ttl)

    def issue_access_token(self, user_id: int) -> IssuedToken:
        ttl = self._access_ttl()
        try:
            token = create_access_token(identity=str(user_id), expires_delta=ttl)
        except (RuntimeError, PyJWTError, NotImplementedError) as exc:
            raise IssuanceError() from exc
        return IssuedToken(token=token, expires_in=int(ttl.total_seconds()))

    def issue_refresh_token(self, user_id: int) -> str:
        try:
            return create_refresh_token(
                identity=str(user_id),
                additional_claims={REFRESH_CLAIM: True},
            )
        except (RuntimeError, PyJWTError, NotImplementedError) as exc:
            raise IssuanceError() from exc

    def verify(self, token: str, *, refresh: bool | None = None) -> VerifiedToken:
        """
        Check signature, expiry and claims of ``token``.

        :param token: Encoded JWT.
        :param refresh: ``True`` to require a refresh token, ``False`` to
            require an access token, ``None`` to accept either.
        :raises InvalidTokenError: When the token cannot be trusted.
        """
        if not token:
            raise InvalidTokenError()
        try:
            claims = cast(dict[str, Any], decode_token(token))
        except (PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError() from exc

        if any(claims.get(name) in (None, "") for name in REQUIRED_CLAIMS):
            raise InvalidTokenError()
        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc

        is_refresh = claims.get("type") == "refresh" and claims.get(REFRESH_CLAIM) is True
        if refresh is True and not is_refresh:
            raise InvalidTokenError("Wrong token type")
        if refresh is False and claims.get("type") != "access":
            raise InvalidTokenError("Wrong token type")

        return VerifiedToken(user_id=user_id, claims=claims)
