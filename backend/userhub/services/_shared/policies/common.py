"""Field policies shared by user use cases.

Each returns the cleaned value or raises :class:`InvalidInputError`
(:class:`InvalidIDError` for identifiers). The API layer validates with
marshmallow first; these checks keep the service safe when it is driven
directly (CLI, tests, other callers).
"""

from __future__ import annotations

from uuid import UUID

from userhub.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH
from userhub.services._shared.errors import InvalidIDError, InvalidInputError


def clean_name(value: object) -> str:
    """Return ``value`` trimmed, enforcing the 2-100 character rule."""
    if not isinstance(value, str):
        raise InvalidInputError("Invalid request data", {"name": ["Not a valid string."]})
    name = value.strip()
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise InvalidInputError(
            "Invalid request data",
            {"name": [f"Length must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH}."]},
        )
    return name


def is_plausible_email(value: str) -> bool:
    """Simplified syntax check: one ``@``, non-empty parts, dotted domain."""
    if not value or any(ch.isspace() for ch in value) or len(value) > EMAIL_MAX_LENGTH:
        return False
    local, sep, domain = value.partition("@")
    if not sep or "@" in domain:
        return False
    if not local or not domain:
        return False
    return "." in domain and not domain.startswith(".") and not domain.endswith(".")


def clean_email(value: object) -> str:
    """Return ``value`` trimmed when it passes :func:`is_plausible_email`."""
    if not isinstance(value, str):
        raise InvalidInputError("Invalid request data", {"email": ["Not a valid string."]})
    email = value.strip()
    if not is_plausible_email(email):
        raise InvalidInputError("Invalid request data", {"email": ["Not a valid email address."]})
    return email


def parse_uuid(value: object) -> UUID:
    """Return ``value`` as a :class:`~uuid.UUID` or raise :class:`InvalidIDError`."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidIDError(str(value)) from exc
