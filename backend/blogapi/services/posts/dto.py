from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from blogapi.services._shared.dto import PaginationIn

if TYPE_CHECKING:
    from blogapi.models.post import Post


@dataclass(frozen=True, slots=True)
class PostCreateIn:
    """
    Input DTO for a new post.

    :param title: Post title.
    :param content: Post body.
    """

    title: str
    content: str


@dataclass(frozen=True, slots=True)
class PostUpdateIn:
    """
    Input DTO replacing a post's title and content.

    :param post_id: Target post.
    :param title: New title.
    :param content: New body.
    """

    post_id: int
    title: str
    content: str


@dataclass(frozen=True, slots=True)
class PostListIn:
    """
    Listing parameters.

    :param pagination: Page, size and sort tokens.
    :param user_id: Restrict to posts owned by this user.
    """

    pagination: PaginationIn = field(default_factory=PaginationIn)
    user_id: int | None = None


@dataclass(frozen=True, slots=True)
class PostOut:
    id: int
    title: str
    content: str
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, post: Post) -> PostOut:
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            user_id=post.user_id,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )
