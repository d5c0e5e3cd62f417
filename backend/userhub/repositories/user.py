"""User repository backed by SQLAlchemy."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from userhub.models.base import utcnow
from userhub.models.user import EMAIL_ACTIVE_CONSTRAINT, User
from userhub.repositories.base import BaseRepository
from userhub.services._shared.errors import StoreError, violates


def _store_error(operation: str, exc: SQLAlchemyError) -> StoreError:
    """Wrap ``exc`` and tag it when the active-email index rejected the write."""
    constraint = (
        EMAIL_ACTIVE_CONSTRAINT
        if violates(exc, EMAIL_ACTIVE_CONSTRAINT, column="users.email")
        else None
    )
    return StoreError(operation, exc, constraint=constraint)


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Implements :class:`~userhub.services._shared.ports.UserRepositoryPort`.
    Every driver failure surfaces as :class:`StoreError`; a unique-index
    violation carries ``constraint=EMAIL_ACTIVE_CONSTRAINT`` so the service
    can report it as a conflict.
    """

    model = User

    def _default_order(self) -> list[Any]:
        return [User.created_at.asc(), User.id.asc()]

    # ------------------------------- Writes ---------------------------------

    def create(self, user: User) -> User:
        """Insert ``user`` and flush so timestamps are populated.

        :param user: Transient user with ``id``, ``name`` and ``email`` set.
        :type user: User
        :returns: The same instance, now persistent.
        :rtype: User
        :raises StoreError: On any persistence failure.
        """
        try:
            return self.add(user)
        except SQLAlchemyError as exc:
            raise _store_error("insert user", exc) from exc

    def update(self, user: User) -> User:
        """Persist every field of ``user``.

        ``updated_at`` is always reassigned, so a write happens even when
        neither ``name`` nor ``email`` changed.

        :param user: User loaded in this session or a detached copy.
        :type user: User
        :returns: The persistent instance.
        :rtype: User
        :raises StoreError: On any persistence failure.
        """
        try:
            if user not in self.session:
                user = self.session.merge(user)
            user.updated_at = utcnow()
            self.session.flush()
            return user
        except SQLAlchemyError as exc:
            raise _store_error("update user", exc) from exc

    def delete(self, user_id: UUID) -> None:
        """Soft-delete the active row with ``user_id``; no-op when absent.

        :param user_id: Identifier of the user.
        :type user_id: uuid.UUID
        :raises StoreError: On any persistence failure.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.active_clause())
            .values(deleted_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        try:
            self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreError("delete user", exc) from exc

    # ------------------------------- Reads ----------------------------------

    def get_by_id(self, user_id: UUID) -> User | None:
        try:
            return self.get(user_id)
        except SQLAlchemyError as exc:
            raise StoreError("get user by id", exc) from exc

    def get_by_email(self, email: str) -> User | None:
        """Fetch the active user holding ``email`` (exact match).

        :param email: Email address as stored.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        try:
            return self.find_one(email=email)
        except SQLAlchemyError as exc:
            raise StoreError("get user by email", exc) from exc

    def get_all(self, *, page: int, per_page: int) -> tuple[list[User], int]:
        """Return one page of active users ordered by creation time.

        :param page: 1-based page number.
        :type page: int
        :param per_page: Page size.
        :type per_page: int
        :returns: ``(items, total)`` where ``total`` counts all active users.
        :rtype: tuple[list[User], int]
        """
        try:
            return self.page(page=page, per_page=per_page)
        except SQLAlchemyError as exc:
            raise StoreError("list users", exc) from exc
