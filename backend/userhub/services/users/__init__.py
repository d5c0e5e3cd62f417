"""User resource service and DTOs."""

from .dto import UserCreateIn, UserOut, UserPageOut, UserUpdateIn
from .service import UserService

__all__ = ["UserService", "UserCreateIn", "UserUpdateIn", "UserOut", "UserPageOut"]
