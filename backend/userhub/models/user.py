"""User model definition."""

from __future__ import annotations

from typing import Final

from sqlalchemy import Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, validates

from userhub.core.extensions import db

from .base import ReprMixin, SoftDeleteMixin, TimestampMixin, UUIDPKMixin

#: Partial unique index guarding "one active user per email".
EMAIL_ACTIVE_CONSTRAINT: Final[str] = "uq_users_email_active"

NAME_MIN_LENGTH: Final[int] = 2
NAME_MAX_LENGTH: Final[int] = 100
EMAIL_MAX_LENGTH: Final[int] = 254

_ACTIVE_ROWS = text("deleted_at IS NULL")


class User(UUIDPKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    The managed user resource.

    Fields
    ------
    id : uuid.UUID
        Generated by the service on creation; never changes.
    name : str
        Display name, 2-100 characters (stored trimmed).
    email : str
        Contact email. Unique among rows where ``deleted_at IS NULL``.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Update timestamp (from mixin).
    deleted_at : datetime | None
        Soft-delete marker (from mixin).
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False)

    # A soft-deleted row releases its email, hence a partial index instead of
    # a plain UNIQUE constraint.
    __table_args__ = (
        Index(
            EMAIL_ACTIVE_CONSTRAINT,
            "email",
            unique=True,
            postgresql_where=_ACTIVE_ROWS,
            sqlite_where=_ACTIVE_ROWS,
        ),
        Index("ix_users_deleted_at", "deleted_at"),
    )

    # -------------------- Validators --------------------
    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        """
        Trim and validate the display name.

        :param key: Field name (``name``).
        :type key: str
        :param value: Raw name.
        :type value: str
        :returns: Trimmed name.
        :rtype: str
        :raises ValueError: If the name is missing or out of range.
        """
        if not isinstance(value, str):
            raise ValueError("Name is required.")
        v = value.strip()
        if not NAME_MIN_LENGTH <= len(v) <= NAME_MAX_LENGTH:
            raise ValueError(
                f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters."
            )
        return v

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Trim and sanity-check the email.

        :param key: Field name (``email``).
        :type key: str
        :param value: Email to normalize.
        :type value: str
        :returns: Trimmed email.
        :rtype: str
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip()
        # Minimal sanity check; full validation happens at API/service layer.
        if v.count("@") != 1 or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v
