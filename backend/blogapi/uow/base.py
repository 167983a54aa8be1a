"""Unit of Work contract used by services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blogapi.repositories import PostRepository, UserRepository


class UnitOfWork(ABC):
    """
    One transaction around one use case.

    ``with uow:`` commits when the block finishes and rolls back when it
    raises; the exception still propagates.
    """

    users: UserRepository
    posts: PostRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
