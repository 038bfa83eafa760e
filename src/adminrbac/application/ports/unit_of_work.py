"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from adminrbac.application.ports.repositories.admin_repository import AdminRepository
from adminrbac.application.ports.repositories.role_repository import RoleRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def admins(self) -> AdminRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances.

    Entering the context starts a transaction; leaving it normally commits,
    leaving it with an exception rolls back.
    """

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
