"""Liveness probe with a database round-trip."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from userhub.api.deps import json_response, timing
from userhub.core.extensions import db

bp = Blueprint("health", __name__)


def _database_status() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Always 200 while the process serves requests; ``db`` reports the probe."""
    return json_response(
        {"status": "healthy", "message": "API is running", "db": _database_status()}
    )
