import pytest
from sqlalchemy import func, select

from tests.factories.user import UserFactory
from userhub.models.user import User
from userhub.uow import SQLAlchemyUnitOfWork as RWuow


def _count(session) -> int:
    return session.execute(select(func.count()).select_from(User)).scalar_one()


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_clean_exit(self, session):
        with RWuow() as uow:
            uow.users.create(UserFactory.build())

        assert _count(session) == 1

    def test_rolls_back_on_exception(self, session):
        with pytest.raises(ValueError, match="boom"):
            with RWuow() as uow:
                uow.users.create(UserFactory.build())
                raise ValueError("boom")

        assert _count(session) == 0

    def test_repositories_share_the_session(self, session):
        uow = RWuow()
        assert uow.users.session is uow.session
