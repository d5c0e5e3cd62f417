"""User resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import RAISE, Schema, fields, pre_load, validate

from userhub.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH


def _strip_strings(data: Any, keys: tuple[str, ...]) -> Any:
    if not isinstance(data, dict):
        return data
    cleaned = dict(data)
    for key in keys:
        if isinstance(cleaned.get(key), str):
            cleaned[key] = cleaned[key].strip()
    return cleaned


class UserCreateSchema(Schema):
    """Payload for ``POST /users``."""

    class Meta:
        unknown = RAISE

    name = fields.String(
        required=True,
        validate=validate.Length(min=NAME_MIN_LENGTH, max=NAME_MAX_LENGTH),
    )
    email = fields.Email(required=True, validate=validate.Length(max=EMAIL_MAX_LENGTH))

    @pre_load
    def strip(self, data: Any, **_: Any) -> Any:
        return _strip_strings(data, ("name", "email"))


class UserUpdateSchema(Schema):
    """Payload for ``PUT``/``PATCH /users/<id>``.

    Every field is optional; ``null`` is treated the same as an absent key.
    """

    class Meta:
        unknown = RAISE

    name = fields.String(
        allow_none=True,
        validate=validate.Length(min=NAME_MIN_LENGTH, max=NAME_MAX_LENGTH),
    )
    email = fields.Email(allow_none=True, validate=validate.Length(max=EMAIL_MAX_LENGTH))

    @pre_load
    def strip(self, data: Any, **_: Any) -> Any:
        return _strip_strings(data, ("name", "email"))


class UserSchema(Schema):
    """Public representation of a user."""

    id = fields.UUID(required=True)
    name = fields.String(required=True)
    email = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
