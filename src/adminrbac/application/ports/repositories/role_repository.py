"""Role repository port."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from adminrbac.application.dto.role_dto import RoleFilter
from adminrbac.domain.entities import Role


class RoleRepository(Protocol):
    """Port for role persistence."""

    async def get_by_id(self, role_id: UUID, *, for_update: bool = False) -> Role | None: ...

    async def get_by_name(self, name: str, *, active_only: bool = True) -> Role | None: ...

    async def list(
        self,
        *,
        role_filter: RoleFilter | None = None,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Role], str | None]: ...

    async def list_children(self, parent_role_id: UUID) -> list[Role]: ...

    async def count_children(self, parent_role_id: UUID) -> int: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> None:
        """Persist role; raises Conflict if ``role.version`` is stale."""
        ...

    async def delete(self, role_id: UUID) -> None: ...

    async def adjust_assigned_users(
        self, role_id: UUID, delta: int, assigned_at: datetime | None = None
    ) -> None:
        """Atomically add ``delta`` to the role's assigned users counter."""
        ...
