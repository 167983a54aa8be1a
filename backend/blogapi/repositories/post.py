"""Post repository."""

from __future__ import annotations

from blogapi.models.post import Post
from blogapi.repositories.base import BaseRepository


class PostRepository(BaseRepository[Post]):
    """Persistence-only repository for :class:`Post`."""

    model = Post
    sortable = frozenset({"id", "title", "created_at", "updated_at"})
    filterable = frozenset({"user_id"})
    updatable = frozenset({"title", "content"})
