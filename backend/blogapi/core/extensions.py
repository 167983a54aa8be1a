"""Extension singletons, bound to an application by :func:`init_app`."""

from __future__ import annotations

from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from blogapi.infra.security import WerkzeugPasswordHasher

# Deterministic constraint names; services match on them (see ``violates``).
NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}

db = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    session_options={"autoflush": False},
)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)

PASSWORD_HASHER_KEY = "blogapi.password_hasher"


def init_app(app: Flask) -> None:
    """Bind database, migrations, JWT, rate limiting and the password hasher.

    The hasher lives in ``app.extensions`` so every request thread of the
    process shares its concurrency bound (``PASSWORD_HASH_CONCURRENCY``).
    """
    db.init_app(app)

    from blogapi import models  # noqa: F401  # register tables on db.metadata

    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    app.extensions[PASSWORD_HASHER_KEY] = WerkzeugPasswordHasher(
        method=app.config.get("PASSWORD_HASH_METHOD", "scrypt"),
        max_concurrent=int(app.config.get("PASSWORD_HASH_CONCURRENCY", 4)),
    )


def get_password_hasher() -> WerkzeugPasswordHasher:
    """Password hasher of the current application.

    :raises RuntimeError: If :func:`init_app` has not run for this app.
    """
    try:
        return current_app.extensions[PASSWORD_HASHER_KEY]
    except KeyError:
        raise RuntimeError("Password hasher is not initialized. Call init_app() first.") from None
