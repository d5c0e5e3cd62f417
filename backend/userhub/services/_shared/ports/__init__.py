"""Service ports (protocols) and their in-process adapters."""

from .user_repository import InMemoryUserRepository, InMemoryUserStore, UserRepositoryPort

__all__ = ["UserRepositoryPort", "InMemoryUserRepository", "InMemoryUserStore"]
