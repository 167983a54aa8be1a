"""Post resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class PostWriteSchema(Schema):
    """Payload for creating or replacing a post."""

    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=validate.Length(min=1, max=255))
    content = fields.String(required=True, validate=validate.Length(min=1))


class PostFilterSchema(Schema):
    """Supported query parameters for listing posts."""

    class Meta:
        unknown = EXCLUDE

    user_id = fields.Integer(load_default=None, validate=validate.Range(min=1))


class PostSchema(Schema):
    """Public representation of a post."""

    id = fields.Integer(required=True)
    title = fields.String(required=True)
    content = fields.String(required=True)
    user_id = fields.Integer(required=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
