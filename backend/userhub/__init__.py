"""userhub: REST API managing users with soft delete and pagination."""

from __future__ import annotations

from userhub.factory import create_app

__version__ = "0.1.0"

__all__ = ["__version__", "create_app"]
