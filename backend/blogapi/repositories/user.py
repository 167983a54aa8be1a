"""User repository: lookups and refresh-token persistence."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select, update

from blogapi.models.user import User
from blogapi.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It stores and compares refresh tokens by value but never issues or
    verifies them.
    """

    model = User
    sortable = frozenset({"id", "email", "name", "created_at"})
    filterable = frozenset({"email"})
    updatable = frozenset({"name"})

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    # ---------------------------- Refresh tokens ----------------------------

    def get_by_refresh_token(self, token: str) -> User | None:
        """Fetch the user whose stored refresh token equals ``token`` exactly.

        :param token: Presented refresh token.
        :type token: str
        :returns: Matching user or ``None``.
        :rtype: User | None
        """
        if not token:
            return None
        stmt = select(User).where(User.refresh_token == token)
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def set_refresh_token(self, user: User, token: str | None) -> None:
        """Overwrite the stored refresh token (last write wins)."""
        user.refresh_token = token
        self.flush()

    def swap_refresh_token(self, user_id: int, *, expected: str, new: str) -> bool:
        """
        Replace the stored refresh token only if it still equals ``expected``.

        Runs as a single ``UPDATE ... WHERE refresh_token = :expected`` so two
        concurrent rotations of the same token cannot both succeed.

        :param user_id: Owner of the token.
        :param expected: Value presented by the client.
        :param new: Freshly issued refresh token.
        :returns: ``True`` when exactly one row was updated.
        :rtype: bool
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new)
            .execution_options(synchronize_session="evaluate")
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1
