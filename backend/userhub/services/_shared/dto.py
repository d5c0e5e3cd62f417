# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


def ceil_div(total: int, per_page: int) -> int:
    """
    Integer ceiling division used for ``total_pages``.

    :param total: Number of matching rows (>= 0).
    :type total: int
    :param per_page: Page size (>= 1).
    :type per_page: int
    :returns: ``ceil(total / per_page)`` without floating point.
    :rtype: int
    :raises ValueError: If ``per_page`` is not positive.
    """
    if per_page < 1:
        raise ValueError("per_page must be >= 1")
    return (max(total, 0) + per_page - 1) // per_page


@dataclass(frozen=True, slots=True)
class PaginationIn:
    """
    Input pagination contract.

    :param page: 1-based page number.
    :type page: int
    :param per_page: Page size.
    :type per_page: int
    """

    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE


def normalize_pagination(
    page: int | None,
    per_page: int | None,
    *,
    default_per_page: int = DEFAULT_PER_PAGE,
    max_per_page: int = MAX_PER_PAGE,
) -> PaginationIn:
    """
    Apply the paging rule shared by the HTTP layer and the services.

    A missing or non-positive ``page`` becomes :data:`DEFAULT_PAGE`. A
    ``per_page`` that is missing, below 1 or above ``max_per_page`` becomes
    ``default_per_page``.

    :param page: Requested 1-based page.
    :type page: int | None
    :param per_page: Requested page size.
    :type per_page: int | None
    :param default_per_page: Size used when ``per_page`` is out of range.
    :type default_per_page: int
    :param max_per_page: Largest accepted size.
    :type max_per_page: int
    :returns: Normalized pagination value object.
    :rtype: PaginationIn
    """
    if page is None or page < 1:
        page = DEFAULT_PAGE
    if per_page is None or not 1 <= per_page <= max_per_page:
        per_page = default_per_page
    return PaginationIn(page=page, per_page=per_page)


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param page: Current page (1-based).
    :type page: int
    :param per_page: Page size.
    :type per_page: int
    :param total: Total rows available.
    :type total: int
    :param total_pages: ``ceil(total / per_page)``.
    :type total_pages: int
    """

    page: int
    per_page: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, *, page: int, per_page: int, total: int) -> PageMeta:
        return cls(
            page=page,
            per_page=per_page,
            total=int(total),
            total_pages=ceil_div(int(total), per_page),
        )
