from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from userhub.services._shared.dto import (
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    PaginationIn,
    normalize_pagination,
)
from userhub.uow.base import UnitOfWork
from userhub.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

UowFactory = Callable[[], UnitOfWork]


@dataclass(slots=True)
class ServiceContext:
    """Request-scoped data a service logs with.

    :param request_id: Correlation id of the HTTP request, if any.
    """

    request_id: str | None = None


class BaseService:
    """
    Shared plumbing for services: unit-of-work construction, pagination and
    log context.

    Services reach storage only through the units of work built here. By
    default those are the SQLAlchemy ones; pass ``uow_factory`` (and
    optionally ``ro_uow_factory``) to run the same service on another
    backend, e.g. :class:`~userhub.uow.memory.InMemoryUnitOfWork`.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        uow_factory: UowFactory | None = None,
        ro_uow_factory: UowFactory | None = None,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = MAX_PER_PAGE,
    ) -> None:
        """
        :param ctx: Request-scoped context; an empty one when omitted.
        :param uow_factory: Builds read-write units of work.
        :param ro_uow_factory: Builds read-only units of work. Falls back to
            ``uow_factory`` when only that one is given.
        :param default_per_page: Page size used when the requested one is
            out of range.
        :param max_per_page: Largest accepted page size.
        """
        self.ctx = ctx or ServiceContext()
        self._uow_factory = uow_factory
        self._ro_uow_factory = ro_uow_factory or uow_factory
        self.default_per_page = default_per_page
        self.max_per_page = max_per_page

    def rw_uow(self) -> UnitOfWork:
        """Unit of work that commits on a clean exit."""
        if self._uow_factory is None:
            return SQLAlchemyUnitOfWork()
        return self._uow_factory()

    def ro_uow(self, *, isolation: str | None = None) -> UnitOfWork:
        """
        Unit of work that refuses writes.

        :param isolation: Isolation level for the SQLAlchemy backend; ignored
            when a custom factory was given.
        """
        if self._ro_uow_factory is None:
            return SQLAlchemyReadOnlyUnitOfWork(
                isolation_level=isolation or self.DEFAULT_READ_ISOLATION
            )
        return self._ro_uow_factory()

    def ensure_pagination(self, *, page: int, per_page: int) -> PaginationIn:
        """Bring paging input into range with :func:`normalize_pagination`."""
        return normalize_pagination(
            int(page),
            int(per_page),
            default_per_page=self.default_per_page,
            max_per_page=self.max_per_page,
        )

    def log_extra(self, **fields: Any) -> dict[str, Any]:
        """``extra=`` mapping for service log records, tagged with the request id."""
        if self.ctx.request_id is not None:
            fields["request_id"] = self.ctx.request_id
        return fields
