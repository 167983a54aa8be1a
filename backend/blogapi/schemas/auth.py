"""Authentication-related Marshmallow schemas.

Input schemas check presence and types, plus email syntax on login. The
registration policy (lengths, email syntax, password strength) is enforced by
the auth service.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class RegisterSchema(Schema):
    """Input payload for account registration."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True)
    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True, validate=validate.Email())
    password = fields.String(required=True, load_only=True)


class TokenPairSchema(Schema):
    """Response payload for login and refresh."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")
    expires_in = fields.Integer(required=True)


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.String(required=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
