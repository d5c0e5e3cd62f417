"""Shared fixtures.

Database tests share one connection to an in-memory SQLite database. Each
test runs inside a transaction that is rolled back afterwards, and the app's
``db.session`` is swapped for a session joined to it. Service tests marked
``memory`` use :class:`InMemoryUnitOfWork` and need no database at all.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy.orm import scoped_session, sessionmaker

from userhub.core.config import TestingConfig
from userhub.core.extensions import db as _db
from userhub.factory import create_app
from userhub.services._shared.ports import InMemoryUserStore
from userhub.services.users import UserService
from userhub.uow import InMemoryUnitOfWork


@pytest.fixture(scope="session")
def app():
    """Application built from :class:`TestingConfig`.

    No app context is left pushed, so every test-client request gets a fresh
    ``g`` (request id, timings).
    """
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Schema created once for the run and dropped at the end."""
    with app.app_context():
        _db.create_all()
    yield _db
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(app, db):
    with app.app_context():
        conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Scoped session for one test, installed as ``db.session``.

    Notes
    -----
    The outer SAVEPOINT keeps pysqlite inside one real transaction, so a
    ``session.commit()`` (which only releases the session's own SAVEPOINT
    under ``join_transaction_mode="create_savepoint"``) never reaches disk.
    """
    outer = connection.begin()
    connection.begin_nested()

    scoped = scoped_session(
        sessionmaker(bind=connection, join_transaction_mode="create_savepoint")
    )
    app_session, db.session = db.session, scoped
    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = app_session
        outer.rollback()


@pytest.fixture()
def client(app, session):
    return app.test_client()


@pytest.fixture()
def memory_store() -> InMemoryUserStore:
    """Fresh in-memory user table."""
    return InMemoryUserStore()


@pytest.fixture()
def memory_service(memory_store) -> UserService:
    """UserService running on :class:`InMemoryUnitOfWork`."""
    return UserService(
        uow_factory=lambda: InMemoryUnitOfWork(memory_store),
        ro_uow_factory=lambda: InMemoryUnitOfWork(memory_store, read_only=True),
    )

