"""Factory Boy base wired to the Flask-SQLAlchemy session of the running test."""

from __future__ import annotations

import factory
from sqlalchemy.orm import Session

_bound: Session | None = None


def bind_session(session: Session | None) -> None:
    """Point every factory at ``session`` (``None`` unbinds)."""
    global _bound
    _bound = session


def current_session() -> Session:
    """Session used by :class:`BaseFactory`.

    :raises RuntimeError: When a factory runs in a test without the ``app``
        fixture, i.e. without a database.
    """
    if _bound is None:
        raise RuntimeError("No database for factories; request the 'app' fixture.")
    return _bound


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Flushes on create so ids are available; the test decides on commits."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = current_session
        sqlalchemy_session_persistence = "flush"
