"""SQLAlchemy repositories."""

from __future__ import annotations

from userhub.repositories.base import BaseRepository, paginate_select
from userhub.repositories.user import UserRepository

__all__ = ["BaseRepository", "UserRepository", "paginate_select"]
