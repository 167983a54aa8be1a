from __future__ import annotations

import logging

from blogapi.models.post import Post
from blogapi.services._shared.base import AuthenticatedContext, BaseService
from blogapi.services._shared.dto import PageMeta
from blogapi.services._shared.errors import NotFoundError

from .dto import PostCreateIn, PostListIn, PostOut, PostUpdateIn

logger = logging.getLogger(__name__)


class PostService(BaseService):
    """CRUD over posts. Only the owner may change or remove a post."""

    def list_posts(self, dto: PostListIn) -> tuple[list[PostOut], PageMeta]:
        """Return one page of posts and its metadata."""
        pagination = self.ensure_pagination(
            page=dto.pagination.page,
            limit=dto.pagination.limit,
            sort=dto.pagination.sort,
        )
        with self.rw_uow() as uow:
            page = uow.posts.paginate(pagination, filters={"user_id": dto.user_id})
            items = [PostOut.from_model(p) for p in page.items]
        return items, PageMeta.from_page(page)

    def get_post(self, post_id: int) -> PostOut:
        """
        :raises NotFoundError: If the post does not exist.
        """
        with self.rw_uow() as uow:
            post = uow.posts.get(post_id)
            if post is None:
                raise NotFoundError("Post", post_id)
            return PostOut.from_model(post)

    def create_post(self, ctx: AuthenticatedContext, dto: PostCreateIn) -> PostOut:
        """Create a post owned by the authenticated user."""
        with self.rw_uow() as uow:
            post = uow.posts.add(Post(title=dto.title, content=dto.content, user_id=ctx.user_id))
            out = PostOut.from_model(post)
        logger.info("Post created", extra={"post_id": out.id, "user_id": ctx.user_id})
        return out

    def update_post(self, ctx: AuthenticatedContext, dto: PostUpdateIn) -> PostOut:
        """
        Replace title and content.

        :raises NotFoundError: If the post does not exist.
        :raises AuthorizationError: If the caller does not own the post.
        """
        with self.rw_uow() as uow:
            post = uow.posts.get(dto.post_id)
            if post is None:
                raise NotFoundError("Post", dto.post_id)
            self.ensure_owner(ctx.user_id, post.user_id, msg="You can only modify your own posts.")
            uow.posts.update(post, title=dto.title, content=dto.content)
            out = PostOut.from_model(post)
        logger.info("Post updated", extra={"post_id": out.id, "user_id": ctx.user_id})
        return out

    def delete_post(self, ctx: AuthenticatedContext, post_id: int) -> None:
        """
        :raises NotFoundError: If the post does not exist.
        :raises AuthorizationError: If the caller does not own the post.
        """
        with self.rw_uow() as uow:
            post = uow.posts.get(post_id)
            if post is None:
                raise NotFoundError("Post", post_id)
            self.ensure_owner(ctx.user_id, post.user_id, msg="You can only delete your own posts.")
            uow.posts.delete(post)
        logger.info("Post deleted", extra={"post_id": post_id, "user_id": ctx.user_id})
