"""Column mixins shared by :class:`User` and :class:`Post`."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class PKMixin:
    """Integer surrogate key ``id``."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class TimestampMixin:
    """``created_at``/``updated_at`` maintained by the database.

    Both default to ``now()`` on insert; ``updated_at`` is bumped by the ORM
    whenever a row is updated through it.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )


class ReprMixin:
    """``<Model id=1 ...>`` built from :attr:`__repr_attrs__`.

    Never list credentials or tokens here; reprs end up in tracebacks.
    """

    __repr_attrs__: ClassVar[tuple[str, ...]] = ("id",)

    def __repr__(self) -> str:
        parts = " ".join(f"{name}={getattr(self, name, None)!r}" for name in self.__repr_attrs__)
        return f"<{type(self).__name__} {parts}>"
