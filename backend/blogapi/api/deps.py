"""Shared API helpers: envelopes, auth guard, pagination and service wiring."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from blogapi.api.envelope import Envelope
from blogapi.core.errors import Unauthorized
from blogapi.core.extensions import get_password_hasher
from blogapi.core.logger import ensure_request_id
from blogapi.infra.jwt import JWTTokenProvider
from blogapi.schemas.common import PaginationQuerySchema
from blogapi.services._shared.base import AuthenticatedContext
from blogapi.services._shared.dto import PaginationIn
from blogapi.services._shared.errors import InvalidTokenError
from blogapi.services._shared.ports import TokenProvider
from blogapi.services.auth import AuthSessionConfig, AuthSessionService
from blogapi.services.posts import PostService

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


# ------------------------------- Responses ----------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def envelope_response(envelope: Envelope) -> Response:
    """Render an :class:`Envelope` with its own status code."""

    return json_response(envelope.to_dict(), status=envelope.status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ------------------------------- Pagination ---------------------------------


def parse_pagination(default_limit: int = 20, max_limit: int = 100) -> PaginationIn:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return PaginationIn(page=data["page"], limit=data["limit"], sort=data["sort"])


# ------------------------------ Composition ---------------------------------


def get_token_provider() -> TokenProvider:
    return JWTTokenProvider()


def build_auth_service() -> AuthSessionService:
    """Wire the auth service with the JWT adapter and the shared hasher."""

    return AuthSessionService(
        token_provider=get_token_provider(),
        password_hasher=get_password_hasher(),
        config=AuthSessionConfig(
            verify_refresh_signature=bool(
                current_app.config.get("AUTH_REFRESH_VERIFY_SIGNATURE", True)
            ),
        ),
    )


def build_post_service() -> PostService:
    return PostService()


# --------------------------------- Auth -------------------------------------


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token.

    The wrapped view receives an :class:`AuthenticatedContext` as the ``auth``
    keyword argument. Refresh tokens are refused here.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = _bearer_token()
        if token is None:
            raise Unauthorized("Missing bearer token")
        try:
            verified = get_token_provider().verify(token, refresh=False)
        except InvalidTokenError as exc:
            raise Unauthorized("Invalid or expired access token") from exc
        ctx = AuthenticatedContext(
            user_id=verified.user_id,
            claims=verified.claims,
            request_id=ensure_request_id(),
        )
        return func(*args, auth=ctx, **kwargs)

    return wrapper  # type: ignore[return-value]
