"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from marshmallow import EXCLUDE, Schema, fields, pre_load

from userhub.services._shared.dto import (
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    PageMeta,
    normalize_pagination,
)


def _as_int(raw: Any) -> int | None:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


class PaginationQuerySchema(Schema):
    """Parse ``page``/``per_page`` query parameters.

    Unparseable or out-of-range values fall back to the defaults instead of
    failing validation (see :func:`normalize_pagination`).
    """

    class Meta:
        unknown = EXCLUDE

    def __init__(
        self,
        *,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = MAX_PER_PAGE,
        **kwargs: Any,
    ) -> None:
        self._default_per_page = default_per_page
        self._max_per_page = max_per_page
        super().__init__(**kwargs)

    page = fields.Integer(load_default=DEFAULT_PAGE)
    per_page = fields.Integer(load_default=DEFAULT_PER_PAGE)

    @pre_load
    def apply_defaults(self, data: Mapping[str, Any], **_: Any) -> dict[str, Any]:
        pagination = normalize_pagination(
            _as_int(data.get("page")),
            _as_int(data.get("per_page")),
            default_per_page=self._default_per_page,
            max_per_page=self._max_per_page,
        )
        return {"page": pagination.page, "per_page": pagination.per_page}


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    per_page = fields.Integer(required=True)
    total_pages = fields.Integer(required=True)


def build_meta(meta: PageMeta) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    return MetaSchema().dump(meta)
