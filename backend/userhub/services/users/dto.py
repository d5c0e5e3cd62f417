"""
DTOs for UserService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from userhub.services._shared.dto import PageMeta

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    """
    Input DTO for user creation.

    :param name: Display name (2-100 characters).
    :type name: str
    :param email: Contact email, unique among active users.
    :type email: str
    """

    name: str
    email: str


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for partial updates.

    ``None`` means "field not supplied"; any string, including an empty one,
    is a supplied value and gets validated.

    :param name: Optional new name.
    :type name: str | None
    :param email: Optional new email.
    :type email: str | None
    """

    name: str | None = None
    email: str | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Output DTO representing public user data.

    :param id: User identifier.
    :type id: uuid.UUID
    :param name: Display name.
    :type name: str
    :param email: Email address.
    :type email: str
    :param created_at: Creation timestamp.
    :type created_at: datetime
    :param updated_at: Last modification timestamp.
    :type updated_at: datetime
    """

    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class UserPageOut:
    """
    One page of users plus pagination metadata.

    :param items: Users on the requested page.
    :type items: list[UserOut]
    :param meta: ``total``, ``page``, ``per_page`` and ``total_pages``.
    :type meta: PageMeta
    """

    items: list[UserOut] = field(default_factory=list)
    meta: PageMeta = field(default_factory=lambda: PageMeta.build(page=1, per_page=10, total=0))
