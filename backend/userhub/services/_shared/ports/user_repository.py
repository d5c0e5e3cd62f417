from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol
from uuid import UUID

from userhub.models.base import utcnow
from userhub.models.user import EMAIL_ACTIVE_CONSTRAINT, User
from userhub.services._shared.errors import StoreError


class UserRepositoryPort(Protocol):
    """
    Persistence contract for :class:`~userhub.models.user.User`.

    Every lookup is scoped to non-deleted rows. Implementations raise
    :class:`StoreError` for persistence failures and never decode constraint
    violations into domain errors; "absent" is reported as ``None``.
    """

    def create(self, user: User) -> User:
        """Insert ``user``. Timestamps are assigned by the store."""

    def get_by_id(self, user_id: UUID) -> User | None:
        """Return the active user with ``user_id`` or ``None``."""

    def get_by_email(self, email: str) -> User | None:
        """Return the active user holding ``email`` or ``None``."""

    def get_all(self, *, page: int, per_page: int) -> tuple[list[User], int]:
        """
        Return one page of active users and the total active count.

        :returns: ``(items, total)`` with ``len(items) <= per_page``.
        """

    def update(self, user: User) -> User:
        """Overwrite the stored row identified by ``user.id``."""

    def delete(self, user_id: UUID) -> None:
        """Soft-delete the row. Absent rows are silently ignored."""


@dataclass(frozen=True, slots=True)
class _Row:
    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    seq: int


class InMemoryUserStore:
    """
    Process-local table of user rows.

    Rows are immutable records; callers always receive detached
    :class:`User` copies, so in-place mutation never leaks into the store
    before :meth:`InMemoryUserRepository.update` is called.

    .. note::
       Uses a re-entrant lock to keep check-and-write steps atomic in tests.
    """

    def __init__(self) -> None:
        self.rows: dict[UUID, _Row] = {}
        self.lock = threading.RLock()
        self._seq = itertools.count(1)

    def next_seq(self) -> int:
        return next(self._seq)

    def snapshot(self) -> dict[UUID, _Row]:
        with self.lock:
            return dict(self.rows)

    def restore(self, snapshot: dict[UUID, _Row]) -> None:
        with self.lock:
            self.rows = dict(snapshot)


class InMemoryUserRepository(UserRepositoryPort):
    """
    Dict-backed implementation of :class:`UserRepositoryPort`.

    Emulates the store-level partial unique index on active emails by
    raising :class:`StoreError` tagged with ``EMAIL_ACTIVE_CONSTRAINT``.
    """

    def __init__(self, store: InMemoryUserStore | None = None) -> None:
        self.store = store or InMemoryUserStore()

    # ------------------------- helpers -------------------------

    @staticmethod
    def _to_entity(row: _Row) -> User:
        return User(
            id=row.id,
            name=row.name,
            email=row.email,
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=row.deleted_at,
        )

    def _active(self) -> list[_Row]:
        return [r for r in self.store.rows.values() if r.deleted_at is None]

    def _ensure_email_free(self, email: str, *, exclude: UUID | None, operation: str) -> None:
        for row in self._active():
            if row.email == email and row.id != exclude:
                raise StoreError(
                    operation,
                    ValueError(f"duplicate key value violates {EMAIL_ACTIVE_CONSTRAINT}"),
                    constraint=EMAIL_ACTIVE_CONSTRAINT,
                )

    # -------------------------- API ----------------------------

    def create(self, user: User) -> User:
        with self.store.lock:
            if user.id is None or user.id in self.store.rows:
                raise StoreError("insert user", ValueError(f"duplicate primary key {user.id}"))
            self._ensure_email_free(user.email, exclude=None, operation="insert user")
            now = utcnow()
            row = _Row(
                id=user.id,
                name=user.name,
                email=user.email,
                created_at=now,
                updated_at=now,
                deleted_at=None,
                seq=self.store.next_seq(),
            )
            self.store.rows[row.id] = row
        user.created_at = row.created_at
        user.updated_at = row.updated_at
        return user

    def get_by_id(self, user_id: UUID) -> User | None:
        row = self.store.rows.get(user_id)
        if row is None or row.deleted_at is not None:
            return None
        return self._to_entity(row)

    def get_by_email(self, email: str) -> User | None:
        for row in self._active():
            if row.email == email:
                return self._to_entity(row)
        return None

    def get_all(self, *, page: int, per_page: int) -> tuple[list[User], int]:
        page = max(int(page), 1)
        per_page = max(int(per_page), 1)
        with self.store.lock:
            active = sorted(self._active(), key=lambda r: (r.created_at, r.seq))
        offset = (page - 1) * per_page
        items = [self._to_entity(r) for r in active[offset : offset + per_page]]
        return items, len(active)

    def update(self, user: User) -> User:
        with self.store.lock:
            current = self.store.rows.get(user.id)
            if current is None or current.deleted_at is not None:
                raise StoreError("update user", LookupError(f"no active row {user.id}"))
            self._ensure_email_free(user.email, exclude=user.id, operation="update user")
            row = replace(current, name=user.name, email=user.email, updated_at=utcnow())
            self.store.rows[row.id] = row
        user.updated_at = row.updated_at
        return user

    def delete(self, user_id: UUID) -> None:
        with self.store.lock:
            row = self.store.rows.get(user_id)
            if row is None or row.deleted_at is not None:
                return
            self.store.rows[user_id] = replace(row, deleted_at=utcnow())
