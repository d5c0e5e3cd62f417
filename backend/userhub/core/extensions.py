"""Extension singletons bound to the app in :func:`init_app`."""

from __future__ import annotations

import logging

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

#: Applied to every constraint or index created without an explicit name.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    session_options={"autoflush": False},
)
migrate = Migrate(render_as_batch=True)


def init_app(app: Flask) -> None:
    """Bind ``db`` and ``migrate``; create missing tables when ``AUTO_CREATE_SCHEMA`` is set."""
    db.init_app(app)

    # Register the models on db.metadata before Alembic or create_all look at it
    from userhub import models  # noqa: F401

    migrate.init_app(app, db)

    if not app.config.get("AUTO_CREATE_SCHEMA"):
        return
    with app.app_context():
        db.create_all()
    log.info("schema.ensured", extra={"operation": "create_all"})
