"""
Units of work over the Flask-SQLAlchemy session.

``SQLAlchemyUnitOfWork`` is used by mutating use cases,
``SQLAlchemyReadOnlyUnitOfWork`` by queries. Both expose ``users`` bound to
the same session as the transaction they control.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction, scoped_session

from userhub.core.extensions import db
from userhub.repositories.user import UserRepository
from userhub.uow.base import UnitOfWork

log = logging.getLogger(__name__)


class SQLAlchemyRepositoryContainer:
    """Bind every repository to one session."""

    def __init__(self, *, session: Session | None = None) -> None:
        self.session = session if session is not None else db.session
        self.users = UserRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write unit of work.

    Commits when the block exits cleanly and rolls back when it raises, so a
    failed use case leaves no partial writes behind. A failing commit is
    rolled back and re-raised.
    """

    def __init__(self, session: Session | None = None) -> None:
        super().__init__(session=session)

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class _WriteGuard:
    """
    Reject writes on one session while armed.

    Two listeners are installed: ``before_flush`` on the concrete session
    (ORM writes) and ``before_cursor_execute`` on the connection (textual or
    Core DML). :meth:`disarm` detaches both; a listener SQLAlchemy refuses to
    detach stays registered but inert.
    """

    WRITE_VERBS = (
        "insert",
        "update",
        "delete",
        "merge",
        "replace",
        "upsert",
        "create",
        "alter",
        "drop",
        "truncate",
        "grant",
        "revoke",
    )

    def __init__(self, session: Session, connection: Connection) -> None:
        self._session = session
        self._connection = connection
        self._armed = False

    def arm(self) -> None:
        self._armed = True
        event.listen(self._session, "before_flush", self._on_flush)
        event.listen(self._connection, "before_cursor_execute", self._on_execute)

    def disarm(self) -> None:
        self._armed = False
        with suppress(InvalidRequestError):
            event.remove(self._session, "before_flush", self._on_flush)
        with suppress(InvalidRequestError):
            event.remove(self._connection, "before_cursor_execute", self._on_execute)

    def _on_flush(self, session, flush_context, instances) -> None:
        if self._armed and (session.new or session.dirty or session.deleted):
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (pending new/dirty/deleted objects)."
            )

    def _on_execute(self, conn, cursor, statement, parameters, context, executemany) -> None:
        if not self._armed or not statement:
            return
        verb = statement.lstrip().split(None, 1)[0].lower()
        if verb.startswith(self.WRITE_VERBS):
            raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {verb.upper()}")


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only unit of work.

    On entry it tries to own a fresh transaction. If the session already has
    one (``InvalidRequestError``), it attaches to it instead and leaves ending
    it to the owner. Either way a :class:`_WriteGuard` blocks writes for the
    duration of the block, and an owned transaction is always rolled back.

    Parameters
    ----------
    session:
        Session to use; defaults to the Flask-scoped ``db.session``.
    isolation_level:
        Isolation level applied to an owned transaction, e.g.
        ``"READ COMMITTED"``. ``None`` keeps the connection default.
    enforce_db_readonly:
        Also issue ``SET TRANSACTION READ ONLY`` on an owned transaction.

    Notes
    -----
    ``SET TRANSACTION`` is only issued on PostgreSQL and MySQL/MariaDB. On
    SQLite only the guard applies.
    """

    TXN_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(
        self,
        session: Session | None = None,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._owned: SessionTransaction | None = None
        self._guard: _WriteGuard | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._owned = self._begin_or_attach()
        connection = self.session.connection()
        if self._owned is not None and connection.dialect.name in self.TXN_DIALECTS:
            self._apply_transaction_mode()

        concrete = self.session() if isinstance(self.session, scoped_session) else self.session
        self._guard = _WriteGuard(concrete, connection)
        self._guard.arm()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                self._owned.__exit__(exc_type, exc, tb)
        finally:
            self._owned = None
            if self._guard is not None:
                self._guard.disarm()
                self._guard = None

    def commit(self) -> None:
        """
        Always refused.

        :raises RuntimeError: on every call.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ------------------------------ internals ---------------------------------

    def _begin_or_attach(self) -> SessionTransaction | None:
        try:
            txn = self.session.begin()
        except InvalidRequestError:
            return None
        txn.__enter__()
        return txn

    def _apply_transaction_mode(self) -> None:
        try:
            if self.isolation_level:
                level = self.isolation_level.strip().upper()
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            log.warning("SET TRANSACTION directives failed (%s); write guard only.", exc)
