"""Settings classes selected by ``APP_ENV``, filled from the environment and ``.env``."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"  # development | testing | production

load_dotenv()

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def env_bool(name: str, default: bool = False) -> bool:
    """``True`` for 1/true/yes/y/on (any case), ``default`` when unset."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``.

    Blank or non-numeric values are treated as unset.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


class BaseConfig:
    """Defaults shared by every environment; most read an env var.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Also used by ``flask-jwt-extended`` when
        ``JWT_SECRET_KEY`` is empty.
    JWT_SECRET_KEY: str
        Key used to sign access and refresh tokens.
    JWT_ALGORITHM: str
        Signing algorithm (HMAC ``HS256`` by default).
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Access token lifetime; its seconds are reported as ``expires_in``.
    JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Refresh token lifetime.
    AUTH_REFRESH_VERIFY_SIGNATURE: bool
        When ``True`` a refresh token matching the stored value must also pass
        signature/expiry verification. ``False`` trusts store equality alone.
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method (``scrypt``, ``pbkdf2:sha256:<rounds>``).
    PASSWORD_HASH_CONCURRENCY: int
        Maximum simultaneous hash/verify computations per process.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter expression applied to the login endpoint.
    RATELIMIT_ENABLED: bool
        Global switch for Flask-Limiter.
    RATELIMIT_STORAGE_URI: str
        Limiter backend (``memory://`` or ``redis://host:port``).
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_ECHO: bool
        Echo emitted SQL to the log.
    LOG_LEVEL: str
        Root logger level name.
    CORS_ORIGINS: str
        Comma-separated origins, or ``*``.
    USE_PROXYFIX: bool
        Trust one hop of ``X-Forwarded-*`` headers. Enable only behind a proxy
        that overwrites them: the login rate limit keys on the client address.
    APP_VERSION: str
        Version string reported by the health endpoint.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(seconds=env_int("JWT_ACCESS_TOKEN_EXPIRES_SECONDS", 3600))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(
        seconds=env_int("JWT_REFRESH_TOKEN_EXPIRES_SECONDS", 14 * 24 * 3600)
    )
    AUTH_REFRESH_VERIFY_SIGNATURE = env_bool("AUTH_REFRESH_VERIFY_SIGNATURE", True)

    # Password hashing
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")
    PASSWORD_HASH_CONCURRENCY = env_int("PASSWORD_HASH_CONCURRENCY", 4)

    # Rate limiting
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    # Bound parameters (refresh tokens, hashes) never appear in DB error text.
    SQLALCHEMY_ENGINE_OPTIONS = {"hide_parameters": True}

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, CORS & proxy
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", False)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local work: debug on, cheaper CORS preflights cached for ten minutes."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600


class TestingConfig(BaseConfig):
    """Fast, isolated test runs.

    In-memory SQLite (or ``TEST_DATABASE_URL``), a fixed signing key, a cheap
    pbkdf2 cost and no rate limiting.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    JWT_SECRET_KEY = "testing-secret-key-with-enough-length-for-hs256"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=14)
    AUTH_REFRESH_VERIFY_SIGNATURE = True
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    USE_PROXYFIX = False
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    """Deployed behind gunicorn and a single reverse proxy."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(name: str | None = None) -> type[BaseConfig]:
    """Config class for ``name`` (default: ``$APP_ENV``).

    Unset or unknown names select :class:`DevelopmentConfig`.
    """
    selected = name if name is not None else os.getenv(ENV_VAR, "development")
    return CONFIG_MAP.get(selected.strip().lower(), DevelopmentConfig)
