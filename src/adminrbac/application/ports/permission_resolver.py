"""Permission resolver port - RBAC authorization."""

from typing import Protocol
from uuid import UUID

from adminrbac.domain.value_objects import PermissionAction, Resource


class PermissionResolver(Protocol):
    """Port for checking admin permissions on console resources."""

    async def can(
        self, admin_id: UUID, resource: Resource | str, action: PermissionAction | str
    ) -> bool: ...
