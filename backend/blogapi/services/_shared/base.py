"""Common ground for application services."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from blogapi.repositories.base import Pagination
from blogapi.services._shared.errors import AuthorizationError
from blogapi.services._shared.policies.common import is_owner
from blogapi.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


@dataclass(frozen=True, slots=True)
class AuthenticatedContext:
    """
    Proof that the caller presented a valid access token.

    ``require_auth`` builds it and hands it to the view, which passes it on to
    any service call that needs an actor.

    :ivar user_id: Subject of the access token.
    :ivar claims: Decoded token claims.
    :ivar request_id: Correlation id of the HTTP request.
    """

    user_id: int
    claims: dict[str, Any] = field(default_factory=dict)
    request_id: str | None = None


class BaseService:
    """
    Services orchestrate repositories inside a Unit of Work and raise
    :mod:`~blogapi.services._shared.errors`. They never import Flask.
    """

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Unit of Work that commits on success and rolls back on error."""
        return SQLAlchemyUnitOfWork()

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """Normalize paging input (both values at least 1)."""
        return Pagination(page=max(int(page), 1), limit=max(int(limit), 1), sort=list(sort or ()))

    def ensure_owner(self, actor_id: int | None, owner_id: int, *, msg: str | None = None) -> None:
        """
        :raises AuthorizationError: Unless ``actor_id`` owns the resource.
        """
        if not is_owner(actor_id=actor_id, owner_id=owner_id):
            raise AuthorizationError(msg or "You can only modify your own resources.")
