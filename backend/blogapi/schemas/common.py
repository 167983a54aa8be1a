"""Query-string and metadata schemas shared by list endpoints."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate


class CommaSeparated(fields.Field):
    """``"-created_at, title"`` -> ``["-created_at", "title"]``."""

    default_error_messages = {"invalid": "Not a valid comma-separated list."}

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> list[str]:
        if not isinstance(value, str):
            raise self.make_error("invalid")
        return [token.strip() for token in value.split(",") if token.strip()]


class PaginationQuerySchema(Schema):
    """``?page=&limit=&sort=`` with a default page size and a hard cap.

    ``limit`` above ``max_limit`` is clamped rather than rejected.
    """

    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=None, validate=validate.Range(min=1))
    sort = CommaSeparated(load_default=list)

    def __init__(self, *, default_limit: int = 20, max_limit: int = 100, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.default_limit = default_limit
        self.max_limit = max_limit

    @post_load
    def _clamp_limit(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        limit = data.get("limit") or self.default_limit
        data["limit"] = min(limit, self.max_limit)
        return data


class MetaSchema(Schema):
    """``meta`` block of paginated responses."""

    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    total = fields.Integer(required=True)
    has_prev = fields.Boolean(required=True)
    has_next = fields.Boolean(required=True)
