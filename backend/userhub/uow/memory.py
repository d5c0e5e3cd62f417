"""
In-process Unit of Work over :class:`InMemoryUserStore`.

Used by service tests and by callers that want the user service without a
database. A read-write unit holds the store lock for its whole block, and
writes made inside a failed block are discarded by restoring the snapshot
taken on entry.
"""

from __future__ import annotations

from typing import Any

from userhub.services._shared.ports import InMemoryUserRepository, InMemoryUserStore
from userhub.uow.base import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    """
    Snapshot-based UoW sharing one :class:`InMemoryUserStore`.

    :param store: Backing store shared across units of work.
    :param read_only: When ``True``, :meth:`commit` raises and no lock or
        snapshot is taken.
    """

    def __init__(self, store: InMemoryUserStore, *, read_only: bool = False) -> None:
        self.store = store
        self.read_only = read_only
        self.users = InMemoryUserRepository(store)
        self._snapshot: dict[Any, Any] | None = None

    def __enter__(self) -> InMemoryUnitOfWork:
        if not self.read_only:
            self.store.lock.acquire()
            self._snapshot = self.store.snapshot()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.read_only:
            return
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self.store.lock.release()

    def commit(self) -> None:
        if self.read_only:
            raise RuntimeError("Read-only UnitOfWork does not allow commit().")
        self._snapshot = None

    def rollback(self) -> None:
        if self._snapshot is not None:
            self.store.restore(self._snapshot)
            self._snapshot = None
