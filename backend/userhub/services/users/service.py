"""
UserService
===========

Application service for the `User` resource:
- Create users ensuring one active user per email
- Fetch one user or a page of users
- Partial updates and soft deletion
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID, uuid4

from sqlalchemy.exc import SQLAlchemyError

from userhub.models.base import as_utc
from userhub.models.user import EMAIL_ACTIVE_CONSTRAINT, User
from userhub.services._shared.base import BaseService
from userhub.services._shared.dto import DEFAULT_PAGE, DEFAULT_PER_PAGE, PageMeta
from userhub.services._shared.errors import (
    AlreadyExistsError,
    NotFoundError,
    StoreError,
    violates,
)
from userhub.services._shared.policies.common import clean_email, clean_name, parse_uuid
from userhub.services.users.dto import UserCreateIn, UserOut, UserPageOut, UserUpdateIn

log = logging.getLogger(__name__)

_EMAIL_TAKEN = "email already in use"


def _to_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=as_utc(user.created_at),
        updated_at=as_utc(user.updated_at),
    )


class UserService(BaseService):
    """
    Application service for the `User` resource.

    Responsibilities
    ----------------
    - Validate input fields before touching the store.
    - Enforce email uniqueness among non-deleted users (pre-check, with the
      store's partial unique index as backstop).
    - Translate store failures into :class:`StoreError` tagged with the
      operation name.
    """

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        """
        Re-wrap persistence failures raised inside the block.

        A failure caused by the active-email index becomes
        :class:`AlreadyExistsError`; anything else becomes
        ``StoreError(operation, cause)``.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            # Raised by commit, after the repository's own flush succeeded
            constraint = (
                EMAIL_ACTIVE_CONSTRAINT
                if violates(exc, EMAIL_ACTIVE_CONSTRAINT, column="users.email")
                else None
            )
            self._raise_store_error(operation, StoreError("commit", exc, constraint=constraint))
        except StoreError as exc:
            self._raise_store_error(operation, exc)

    def _raise_store_error(self, operation: str, exc: StoreError) -> None:
        if exc.constraint == EMAIL_ACTIVE_CONSTRAINT:
            log.info(
                "user.email_conflict",
                extra=self.log_extra(operation=operation),
            )
            raise AlreadyExistsError("User", _EMAIL_TAKEN) from exc
        log.error(
            "user.store_failed",
            extra=self.log_extra(operation=operation),
            exc_info=exc,
        )
        raise StoreError(operation, exc) from exc

    # --------------------------------------------------------------------- #
    # Creation
    # --------------------------------------------------------------------- #

    def create_user(self, dto: UserCreateIn) -> UserOut:
        """
        Create a new user.

        :param dto: User creation input DTO.
        :type dto: UserCreateIn
        :returns: The stored user, timestamps included.
        :rtype: UserOut
        :raises InvalidInputError: When name or email fail validation.
        :raises AlreadyExistsError: When an active user already holds the email.
        :raises StoreError: On persistence failure.
        """
        name = clean_name(dto.name)
        email = clean_email(dto.email)

        with self._store_errors("create user"):
            with self.rw_uow() as uow:
                repo = uow.users
                if repo.get_by_email(email) is not None:
                    raise AlreadyExistsError("User", _EMAIL_TAKEN)

                user = repo.create(User(id=uuid4(), name=name, email=email))
                out = _to_out(user)

        log.info("user.created", extra=self.log_extra(user_id=str(out.id), operation="create_user"))
        return out

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user_by_id(self, user_id: UUID | str) -> UserOut:
        """
        Retrieve a non-deleted user by identifier.

        :param user_id: User identifier (UUID or its string form).
        :type user_id: uuid.UUID | str
        :returns: Public user DTO.
        :rtype: UserOut
        :raises InvalidIDError: When ``user_id`` is not a UUID.
        :raises NotFoundError: If the user does not exist or was deleted.
        """
        uid = parse_uuid(user_id)
        with self._store_errors("get user"):
            with self.ro_uow() as uow:
                user = uow.users.get_by_id(uid)
                if user is None:
                    raise NotFoundError("User", uid)
                return _to_out(user)

    def get_users(self, page: int = DEFAULT_PAGE, per_page: int = DEFAULT_PER_PAGE) -> UserPageOut:
        """
        List non-deleted users, oldest first.

        :param page: 1-based page; values below 1 mean the first page.
        :type page: int
        :param per_page: Page size; values below 1 or above the maximum mean
            the default.
        :type per_page: int
        :returns: Users on the page plus pagination metadata.
        :rtype: UserPageOut
        """
        pagination = self.ensure_pagination(page=page, per_page=per_page)
        with self._store_errors("get users"):
            with self.ro_uow() as uow:
                items, total = uow.users.get_all(
                    page=pagination.page, per_page=pagination.per_page
                )
                outs = [_to_out(u) for u in items]

        return UserPageOut(
            items=outs,
            meta=PageMeta.build(page=pagination.page, per_page=pagination.per_page, total=total),
        )

    # --------------------------------------------------------------------- #
    # Update
    # --------------------------------------------------------------------- #

    def update_user(self, user_id: UUID | str, dto: UserUpdateIn) -> UserOut:
        """
        Apply the supplied fields to an existing user.

        Fields left as ``None`` keep their current value. The row is written
        even when nothing changed, which refreshes ``updated_at``.

        :param user_id: User identifier.
        :type user_id: uuid.UUID | str
        :param dto: Fields to change.
        :type dto: UserUpdateIn
        :returns: Updated user DTO.
        :rtype: UserOut
        :raises InvalidInputError: When a supplied field is invalid.
        :raises NotFoundError: When the user does not exist or was deleted.
        :raises AlreadyExistsError: When another active user holds the new email.
        """
        uid = parse_uuid(user_id)
        name = clean_name(dto.name) if dto.name is not None else None
        email = clean_email(dto.email) if dto.email is not None else None

        with self._store_errors("update user"):
            with self.rw_uow() as uow:
                repo = uow.users
                user = repo.get_by_id(uid)
                if user is None:
                    raise NotFoundError("User", uid)

                if email is not None and email != user.email:
                    if repo.get_by_email(email) is not None:
                        raise AlreadyExistsError("User", _EMAIL_TAKEN)
                    user.email = email
                if name is not None:
                    user.name = name

                user = repo.update(user)
                out = _to_out(user)

        log.info("user.updated", extra=self.log_extra(user_id=str(uid), operation="update_user"))
        return out

    # --------------------------------------------------------------------- #
    # Deletion
    # --------------------------------------------------------------------- #

    def delete_user(self, user_id: UUID | str) -> None:
        """
        Soft-delete a user.

        :param user_id: User identifier.
        :type user_id: uuid.UUID | str
        :raises NotFoundError: When the user does not exist or was already deleted.
        """
        uid = parse_uuid(user_id)
        with self._store_errors("delete user"):
            with self.rw_uow() as uow:
                if uow.users.get_by_id(uid) is None:
                    raise NotFoundError("User", uid)
                uow.users.delete(uid)

        log.info("user.deleted", extra=self.log_extra(user_id=str(uid), operation="delete_user"))
