"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from blogapi.api.deps import build_auth_service, envelope_response, require_auth, timing
from blogapi.api.envelope import success
from blogapi.core.extensions import limiter
from blogapi.schemas import LoginSchema, RegisterSchema, TokenPairSchema, UserSchema
from blogapi.services._shared.base import AuthenticatedContext
from blogapi.services.auth import LoginIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

REFRESH_TOKEN_HEADER = "Refresh-Token"

register_schema = RegisterSchema()
login_schema = LoginSchema()
token_schema = TokenPairSchema()
user_schema = UserSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@timing
def register():
    """Register a new user and return its public representation."""

    data = register_schema.load(request.get_json(silent=True) or {})
    user = build_auth_service().register(RegisterIn(**data))
    return envelope_response(
        success({"user": user_schema.dump(user)}, "User registered successfully", 201)
    )


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue an access/refresh token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    pair = build_auth_service().login(LoginIn(**data))
    return envelope_response(success(token_schema.dump(pair), "Login successfully"))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the refresh token sent in the ``Refresh-Token`` header."""

    pair = build_auth_service().refresh(
        RefreshIn(refresh_token=request.headers.get(REFRESH_TOKEN_HEADER))
    )
    return envelope_response(success(token_schema.dump(pair), "Refresh token successfully"))


@bp.get("/user")
@require_auth
@timing
def current_user(auth: AuthenticatedContext):
    """Return the authenticated user profile."""

    user = build_auth_service().current_user(auth)
    return envelope_response(success({"user": user_schema.dump(user)}, "success"))
