"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar
from uuid import UUID

from flask import Response, current_app, jsonify, request
from marshmallow import Schema

from userhub.schemas.common import PaginationQuerySchema
from userhub.services._shared.dto import DEFAULT_PER_PAGE, MAX_PER_PAGE, PaginationIn
from userhub.services._shared.errors import InvalidInputError
from userhub.services._shared.policies.common import parse_uuid

F = TypeVar("F", bound=Callable[..., Any])


def parse_pagination() -> PaginationIn:
    """Parse ``page``/``per_page`` from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(
        default_per_page=current_app.config.get("DEFAULT_PER_PAGE", DEFAULT_PER_PAGE),
        max_per_page=current_app.config.get("MAX_PER_PAGE", MAX_PER_PAGE),
    )
    data = schema.load(request.args)
    return PaginationIn(page=data["page"], per_page=data["per_page"])


def parse_user_id(raw: str) -> UUID:
    """Parse a path identifier, raising ``InvalidIDError`` when it is not a UUID."""

    return parse_uuid(raw)


def load_json_body(schema: Schema) -> dict[str, Any]:
    """Validate the JSON request body with ``schema``.

    A missing, malformed or non-object body is reported as
    :class:`InvalidInputError`; schema violations raise marshmallow's
    ``ValidationError``, which the error handlers translate the same way.
    """

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidInputError(
            "Invalid request data",
            {"_schema": ["Request body must be a JSON object."]},
        )
    return schema.load(payload)


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
