"""
Errors raised by services and repositories.

Nothing here knows about HTTP; ``userhub/core/errors.py`` decides the status
code and ``code`` field each kind is rendered with.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: BaseException | None, constraint_name: str, *, column: str | None = None) -> bool:
    """
    Tell whether ``exc`` (or anything in its cause chain) is a unique
    violation of ``constraint_name``.

    PostgreSQL names the index in the message. SQLite only names the column
    (``UNIQUE constraint failed: users.email``), which ``column`` matches.
    ``__cause__`` and :attr:`StoreError.cause` links are both followed.
    """
    seen: set[int] = set()
    current = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, IntegrityError):
            message = str(current.orig if current.orig is not None else current).lower()
            if constraint_name.lower() in message or (column and column.lower() in message):
                return True
        current = current.__cause__ or getattr(current, "cause", None)
    return False


class ServiceError(Exception):
    """Root of every service-level error; never an HTTP error itself."""


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when no matching non-deleted entity exists.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: object
    """

    entity: str
    key: object

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class AlreadyExistsError(ServiceError):
    """
    Raised when a uniqueness rule (e.g. active email) would be violated.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"{self.entity} already exists: {self.detail}"


@dataclass(slots=True)
class InvalidInputError(ServiceError):
    """
    Raised when request fields are malformed or out of range.

    :param detail: Human-readable summary.
    :type detail: str
    :param errors: Optional per-field messages.
    :type errors: dict[str, list[str]] | None
    """

    detail: str
    errors: dict[str, list[str]] | None = None

    def __str__(self) -> str:
        return self.detail


@dataclass(slots=True)
class InvalidIDError(ServiceError):
    """
    Raised when an identifier does not parse as the entity id type.

    :param raw: Offending identifier as received.
    :type raw: str
    """

    raw: str

    def __str__(self) -> str:
        return f"Invalid identifier: {self.raw!r}"


class StoreError(ServiceError):
    """
    Wrap any underlying persistence failure with the failing operation.

    The original exception is kept in ``cause`` and chained via
    ``raise ... from``, so nested wraps read like
    ``failed to create user: failed to insert user: <driver message>``.

    ``constraint`` names the store constraint that rejected the write, when
    the backend can tell. Wrapping preserves it.
    """

    def __init__(
        self,
        operation: str,
        cause: BaseException | None = None,
        *,
        constraint: str | None = None,
    ) -> None:
        self.operation = operation
        self.cause = cause
        if constraint is None and isinstance(cause, StoreError):
            constraint = cause.constraint
        self.constraint = constraint
        message = f"failed to {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
