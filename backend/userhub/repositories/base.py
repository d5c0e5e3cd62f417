"""Repository base for SQLAlchemy 2.x models.

Repositories only persist: they never commit, roll back or turn constraint
violations into domain errors. Every statement built here starts from
:meth:`BaseRepository._select`, which adds the model's ``active_clause()``
(``deleted_at IS NULL``) when it has one. There is no global query hook.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from userhub.core.extensions import db

E = TypeVar("E")  # mapped entity


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    per_page: int,
) -> tuple[list[Any], int]:
    """Run ``stmt`` for one page and count all of its rows.

    The count wraps ``stmt`` without its ``ORDER BY``. ``page`` and
    ``per_page`` below 1 are treated as 1.

    :param session: Session to execute on.
    :type session: :class:`sqlalchemy.orm.Session`
    :param stmt: Filtered and ordered select.
    :type stmt: :class:`sqlalchemy.sql.Select`
    :param page: 1-based page number.
    :type page: int
    :param per_page: Page size.
    :type per_page: int
    :returns: ``(items, total)``.
    :rtype: tuple[list[Any], int]
    """
    page, per_page = max(int(page), 1), max(int(per_page), 1)

    total = session.execute(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ).scalar_one()
    rows = session.execute(stmt.limit(per_page).offset((page - 1) * per_page)).scalars()
    return list(rows), int(total)


class BaseRepository(Generic[E]):
    """Soft-delete-aware lookups and pagination for one model.

    Subclasses set ``model`` and may override :meth:`_default_order`.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session shared with the unit of work; ``db.session``
            when omitted.
        """
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def _default_order(self) -> list[Any]:
        return [self.model.id.asc()]  # type: ignore[attr-defined]

    def _select(self) -> Select[Any]:
        stmt = select(self.model)
        active_clause = getattr(self.model, "active_clause", None)
        return stmt.where(active_clause()) if active_clause is not None else stmt

    def _first(self, stmt: Select[Any]) -> E | None:
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so defaults are populated."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Active entity with primary key ``entity_id``, or ``None``."""
        pk = self.model.id  # type: ignore[attr-defined]
        return self._first(self._select().where(pk == entity_id))

    def find_one(self, **filters: Any) -> E | None:
        """First active entity matching every ``column=value`` filter."""
        stmt = self._select().filter_by(**filters)
        return self._first(stmt)

    def page(self, *, page: int, per_page: int) -> tuple[list[E], int]:
        """One page of active entities in :meth:`_default_order`, plus the active total."""
        stmt = self._select().order_by(*self._default_order())
        return paginate_select(self.session, stmt, page=page, per_page=per_page)
