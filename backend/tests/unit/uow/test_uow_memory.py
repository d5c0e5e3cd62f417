import uuid

import pytest

from userhub.models.user import User
from userhub.services._shared.ports import InMemoryUserStore
from userhub.uow import InMemoryUnitOfWork

pytestmark = pytest.mark.memory


def _user(email: str = "mem@example.com") -> User:
    return User(id=uuid.uuid4(), name="Memory User", email=email)


class TestInMemoryUnitOfWork:
    @pytest.fixture()
    def store(self):
        return InMemoryUserStore()

    def test_commits_on_clean_exit(self, store):
        with InMemoryUnitOfWork(store) as uow:
            uow.users.create(_user())

        assert len(store.rows) == 1

    def test_restores_snapshot_on_exception(self, store):
        with InMemoryUnitOfWork(store) as uow:
            uow.users.create(_user("kept@example.com"))

        with pytest.raises(RuntimeError):
            with InMemoryUnitOfWork(store) as uow:
                uow.users.create(_user("dropped@example.com"))
                raise RuntimeError("abort")

        emails = {row.email for row in store.rows.values()}
        assert emails == {"kept@example.com"}

    def test_read_only_refuses_commit(self, store):
        with InMemoryUnitOfWork(store, read_only=True) as uow:
            with pytest.raises(RuntimeError, match="does not allow commit"):
                uow.commit()

    def test_lock_released_after_exit(self, store):
        with pytest.raises(RuntimeError):
            with InMemoryUnitOfWork(store):
                raise RuntimeError("abort")

        assert store.lock.acquire(blocking=False)
        store.lock.release()
