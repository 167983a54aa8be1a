"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RegisterSchema, TokenPairSchema, UserSchema
from .common import MetaSchema, PaginationQuerySchema
from .post import PostFilterSchema, PostSchema, PostWriteSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "UserSchema",
    "MetaSchema",
    "PaginationQuerySchema",
    "PostFilterSchema",
    "PostSchema",
    "PostWriteSchema",
]
