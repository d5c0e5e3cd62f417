"""Service layer public API.

Re-exports
----------
- Shared DTOs (from ``userhub.services._shared.dto``)
    * :class:`PaginationIn`
    * :class:`PageMeta`

- Error taxonomy (from ``userhub.services._shared.errors``)
    * :class:`ServiceError` and its subclasses

The user service itself lives in :mod:`userhub.services.users`.
"""

from __future__ import annotations

from ._shared.dto import PageMeta, PaginationIn
from ._shared.errors import (
    AlreadyExistsError,
    InvalidIDError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
    StoreError,
)

__all__ = [
    # Shared DTOs
    "PaginationIn",
    "PageMeta",
    # Errors
    "ServiceError",
    "AlreadyExistsError",
    "InvalidIDError",
    "InvalidInputError",
    "NotFoundError",
    "StoreError",
]
