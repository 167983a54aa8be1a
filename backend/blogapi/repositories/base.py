"""Shared persistence helpers for the user and post repositories.

Subclasses declare, by column name, what clients may sort on, filter on and
update. Anything outside those whitelists is ignored (sort/filter) or
rejected (update). Repositories flush but never commit; the Unit of Work
owns the transaction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.orm import Session

from blogapi.core.extensions import db

E = TypeVar("E")


@dataclass(slots=True)
class Pagination:
    """1-based page request with ``["-created_at", "title"]`` style sort tokens."""

    page: int
    limit: int
    sort: list[str] = field(default_factory=list)

    @property
    def offset(self) -> int:
        return (max(self.page, 1) - 1) * max(self.limit, 1)


@dataclass(slots=True)
class Page(Generic[E]):
    items: Sequence[E]
    total: int
    page: int
    limit: int

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """``["-created_at", "title"]`` -> ``[("created_at", True), ("title", False)]``.

    Empty tokens (``""``, ``"-"``) are skipped.
    """
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        token = token.strip()
        descending = token.startswith("-")
        name = token.lstrip("-").strip()
        if name:
            parsed.append((name, descending))
    return parsed


def paginate_select(
    session: Session,
    stmt: Select[Any],
    pagination: Pagination,
    *,
    with_total: bool = True,
) -> tuple[list[Any], int]:
    """Run ``stmt`` for one page and optionally count all matching rows.

    :returns: ``(items, total)``; ``total`` is ``0`` when ``with_total`` is off.
    """
    total = 0
    if with_total:
        counted = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = int(session.execute(counted).scalar_one())
    page_stmt = stmt.limit(max(pagination.limit, 1)).offset(pagination.offset)
    return list(session.execute(page_stmt).scalars()), total


class BaseRepository(Generic[E]):
    """Thin CRUD and listing over one mapped model.

    :cvar model: Mapped class handled by the repository.
    :cvar sortable: Column names accepted in sort tokens.
    :cvar filterable: Column names accepted as equality filters.
    :cvar updatable: Column names :meth:`update` may assign.
    """

    model: ClassVar[type[Any]]
    sortable: ClassVar[frozenset[str]] = frozenset({"id"})
    filterable: ClassVar[frozenset[str]] = frozenset()
    updatable: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        """Injected session, or the Flask-scoped ``db.session``."""
        return self._session if self._session is not None else cast(Session, db.session)

    def _column(self, name: str) -> Any:
        return getattr(self.model, name)

    # ------------------------------ Queries ----------------------------------

    def _where(self, stmt: Select[Any], filters: Mapping[str, Any] | None) -> Select[Any]:
        """Apply equality filters; unknown keys and ``None`` values are dropped."""
        clauses: list[ColumnElement[bool]] = [
            self._column(key) == value
            for key, value in (filters or {}).items()
            if key in self.filterable and value is not None
        ]
        return stmt.where(*clauses) if clauses else stmt

    def _order(self, stmt: Select[Any], sort: Iterable[str]) -> Select[Any]:
        """Order by whitelisted tokens, then by ``id`` so pages are stable."""
        orders = [
            self._column(name).desc() if descending else self._column(name).asc()
            for name, descending in parse_sort_tokens(sort)
            if name in self.sortable
        ]
        return stmt.order_by(*orders, self._column("id").asc())

    # -------------------------------- CRUD -----------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        return cast(E | None, self.session.get(self.model, entity_id))

    def exists(self, **filters: Any) -> bool:
        stmt = self._where(select(func.count()).select_from(self.model), filters)
        return bool(self.session.execute(stmt).scalar_one())

    def update(self, instance: E, **fields: Any) -> E:
        """Assign whitelisted attributes (model validators run) and flush.

        :raises ValueError: If any key is not in :attr:`updatable`.
        """
        rejected = sorted(set(fields) - self.updatable)
        if rejected:
            raise ValueError(f"Unknown or non-updatable fields: {rejected}")
        for key, value in fields.items():
            setattr(instance, key, value)
        self.flush()
        return instance

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    # ------------------------------- Listing ---------------------------------

    def paginate(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
        with_total: bool = True,
    ) -> Page[E]:
        """Return one :class:`Page` of filtered, sorted rows."""
        stmt = self._order(self._where(select(self.model), filters), pagination.sort)
        items, total = paginate_select(self.session, stmt, pagination, with_total=with_total)
        return Page(items=items, total=total, page=pagination.page, limit=pagination.limit)
