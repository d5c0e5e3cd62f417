"""
The transactional boundary services run their use cases in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from userhub.services._shared.ports import UserRepositoryPort


class UnitOfWork(ABC):
    """
    Context manager grouping repository calls into one transaction.

    ``users`` is bound to the transaction. Leaving the block normally
    commits; leaving it with an exception rolls back and lets the exception
    propagate. Implementations with different exit rules (read-only units)
    override :meth:`__exit__`.
    """

    users: UserRepositoryPort

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
