"""User endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app

from userhub.api.deps import (
    json_response,
    load_json_body,
    parse_pagination,
    parse_user_id,
    timing,
)
from userhub.core.logger import ensure_request_id
from userhub.schemas import UserCreateSchema, UserSchema, UserUpdateSchema, build_meta
from userhub.services._shared.base import ServiceContext
from userhub.services.users import UserCreateIn, UserService, UserUpdateIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()


def _service() -> UserService:
    return UserService(
        ctx=ServiceContext(request_id=ensure_request_id()),
        default_per_page=current_app.config["DEFAULT_PER_PAGE"],
        max_per_page=current_app.config["MAX_PER_PAGE"],
    )


@bp.post("")
@timing
def create_user():
    """Create a new user."""

    payload = load_json_body(user_create_schema)
    user = _service().create_user(UserCreateIn(name=payload["name"], email=payload["email"]))
    body = {"message": "User created successfully", "data": user_schema.dump(user)}
    return json_response(body, status=201)


@bp.get("")
@timing
def list_users():
    """Return paginated users."""

    pagination = parse_pagination()
    result = _service().get_users(page=pagination.page, per_page=pagination.per_page)
    data = user_list_schema.dump(result.items)
    return json_response({"data": data, "meta": build_meta(result.meta)})


@bp.get("/<user_id>")
@timing
def get_user(user_id: str):
    """Return a single user."""

    user = _service().get_user_by_id(parse_user_id(user_id))
    return json_response(
        {"message": "User retrieved successfully", "data": user_schema.dump(user)}
    )


@bp.route("/<user_id>", methods=["PUT", "PATCH"])
@timing
def update_user(user_id: str):
    """Update the supplied fields of a user."""

    uid = parse_user_id(user_id)
    payload = load_json_body(user_update_schema)
    dto = UserUpdateIn(name=payload.get("name"), email=payload.get("email"))
    user = _service().update_user(uid, dto)
    return json_response({"message": "User updated successfully", "data": user_schema.dump(user)})


@bp.delete("/<user_id>")
@timing
def delete_user(user_id: str):
    """Soft-delete a user."""

    _service().delete_user(parse_user_id(user_id))
    return json_response({"message": "User deleted successfully"})
