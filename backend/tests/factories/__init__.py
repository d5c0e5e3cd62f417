"""Factory Boy base classes persisting through ``db.session``."""

from __future__ import annotations

import factory

from userhub.core.extensions import db


def _session():
    # Looked up per call: the ``session`` fixture swaps ``db.session`` per test
    return db.session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Flush (never commit) built models into the test's transactional session.

    Any test creating models must request the ``session`` fixture.
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = _session
        sqlalchemy_session_persistence = "flush"
