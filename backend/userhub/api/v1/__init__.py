"""Version 1 of the HTTP API."""

from __future__ import annotations

from flask import Blueprint

from userhub.api.v1.health import bp as health_bp
from userhub.api.v1.users import bp as users_bp

API_VERSION = "v1"

#: ``(blueprint, prefix relative to /api/v1)`` pairs mounted by ``userhub.api.init_app``.
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
    (users_bp, "/users"),
]
