"""Post model owned by a user."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogapi.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Post(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Blog post.

    Fields
    ------
    title : str
        Required title (max 255 characters).
    content : str
        Required body text.
    user_id : int
        Owner; only the owner may update or delete the post.
    """

    __tablename__ = "posts"
    __repr_attrs__ = ("id", "user_id")

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    author: Mapped[User] = relationship(back_populates="posts")

    __table_args__ = (Index("ix_posts_user_id", "user_id"),)
