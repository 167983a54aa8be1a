"""Post endpoints. Every route requires a valid access token."""

from __future__ import annotations

from flask import Blueprint, request

from blogapi.api.deps import (
    build_post_service,
    envelope_response,
    json_response,
    parse_pagination,
    require_auth,
    timing,
)
from blogapi.api.envelope import success
from blogapi.schemas import MetaSchema, PostFilterSchema, PostSchema, PostWriteSchema
from blogapi.services._shared.base import AuthenticatedContext
from blogapi.services.posts import PostCreateIn, PostListIn, PostUpdateIn

bp = Blueprint("posts", __name__)

post_schema = PostSchema()
posts_schema = PostSchema(many=True)
write_schema = PostWriteSchema()
filter_schema = PostFilterSchema()
meta_schema = MetaSchema()


@bp.get("")
@require_auth
@timing
def list_posts(auth: AuthenticatedContext):
    """Return a page of posts, optionally filtered by owner."""

    pagination = parse_pagination()
    filters = filter_schema.load(request.args)
    items, meta = build_post_service().list_posts(
        PostListIn(pagination=pagination, user_id=filters["user_id"])
    )
    body = success(posts_schema.dump(items), "Posts retrieved successfully").to_dict()
    body["meta"] = meta_schema.dump(meta)
    return json_response(body)


@bp.post("")
@require_auth
@timing
def create_post(auth: AuthenticatedContext):
    """Create a post owned by the caller."""

    data = write_schema.load(request.get_json(silent=True) or {})
    post = build_post_service().create_post(auth, PostCreateIn(**data))
    return envelope_response(success(post_schema.dump(post), "Post created successfully", 201))


@bp.get("/<int:post_id>")
@require_auth
@timing
def show_post(post_id: int, auth: AuthenticatedContext):
    post = build_post_service().get_post(post_id)
    return envelope_response(success(post_schema.dump(post), "Post retrieved successfully"))


@bp.get("/find/<int:post_id>")
@require_auth
@timing
def find_post(post_id: int, auth: AuthenticatedContext):
    """Alias of ``GET /posts/<id>`` kept for existing clients."""

    post = build_post_service().get_post(post_id)
    return envelope_response(success(post_schema.dump(post), "Post found"))


@bp.put("/<int:post_id>")
@require_auth
@timing
def update_post(post_id: int, auth: AuthenticatedContext):
    """Replace title and content of a post owned by the caller."""

    data = write_schema.load(request.get_json(silent=True) or {})
    post = build_post_service().update_post(auth, PostUpdateIn(post_id=post_id, **data))
    return envelope_response(success(post_schema.dump(post), "Post updated successfully"))


@bp.delete("/<int:post_id>")
@require_auth
@timing
def delete_post(post_id: int, auth: AuthenticatedContext):
    build_post_service().delete_post(auth, post_id)
    return envelope_response(success(None, "Post deleted successfully"))
