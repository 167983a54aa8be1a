"""Pagination values shared by listing services."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from blogapi.repositories.base import Page


@dataclass(frozen=True, slots=True)
class PaginationIn:
    """What the caller asked for: page, page size and sort tokens."""

    page: int = 1
    limit: int = 20
    sort: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class PageMeta:
    """The ``meta`` block returned next to a page of items."""

    page: int
    limit: int
    total: int
    has_prev: bool
    has_next: bool

    @classmethod
    def from_page(cls, page: Page[Any]) -> PageMeta:
        return cls(
            page=page.page,
            limit=page.limit,
            total=page.total,
            has_prev=page.has_prev,
            has_next=page.has_next,
        )
