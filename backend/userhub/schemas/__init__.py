"""Marshmallow schemas for request validation and response serialization."""

from .common import MetaSchema, PaginationQuerySchema, build_meta
from .user import UserCreateSchema, UserSchema, UserUpdateSchema

__all__ = [
    "MetaSchema",
    "PaginationQuerySchema",
    "build_meta",
    "UserCreateSchema",
    "UserUpdateSchema",
    "UserSchema",
]
