"""Unit of Work over the Flask-SQLAlchemy session."""

from __future__ import annotations

from sqlalchemy.orm import Session

from blogapi.core.extensions import db
from blogapi.repositories import PostRepository, UserRepository
from blogapi.uow.base import UnitOfWork


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Repositories bound to one session (``db.session`` unless given).

    :ivar users: :class:`UserRepository`
    :ivar posts: :class:`PostRepository`
    """

    def __init__(self, session: Session | None = None) -> None:
        self.session: Session = session if session is not None else db.session
        self.users = UserRepository(session=self.session)
        self.posts = PostRepository(session=self.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
