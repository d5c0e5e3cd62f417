"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging

from userhub.services._shared.errors import AlreadyExistsError
from userhub.services.users import UserCreateIn, UserService

LOGGER = logging.getLogger(__name__)

USER_FIXTURES: list[dict[str, str]] = [
    {"name": "Alex Martinez", "email": "alex.martinez@example.com"},
    {"name": "Jamie Lee", "email": "jamie.lee@example.com"},
    {"name": "Sara Kim", "email": "sara.kim@example.com"},
    {"name": "Maria Garcia", "email": "maria.garcia@example.com"},
    {"name": "Coach Dan", "email": "coach.dan@example.com"},
]


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def seed_users(
    service: UserService | None = None, *, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Create the demo users through :class:`UserService`.

    An email already held by an active user counts as ``existing``.
    """
    if verbose:
        LOGGER.info("Seeding users...")
    service = service or UserService()
    summary: dict[str, dict[str, int]] = {}
    for fixture in USER_FIXTURES:
        try:
            user = service.create_user(UserCreateIn(name=fixture["name"], email=fixture["email"]))
        except AlreadyExistsError:
            _touch(summary, "users", created=False)
            continue
        _touch(summary, "users", created=True)
        if verbose:
            LOGGER.debug("seed.user_created", extra={"user_id": str(user.id)})
    return summary


def run_all(service: UserService | None = None, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    return seed_users(service, verbose=verbose)


__all__ = ["USER_FIXTURES", "seed_users", "run_all"]
