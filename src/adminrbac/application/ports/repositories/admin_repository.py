"""Admin repository port."""

from typing import Protocol
from uuid import UUID

from adminrbac.application.dto.admin_dto import AdminFilter
from adminrbac.domain.entities import Admin
from adminrbac.domain.value_objects import AccessLevel


class AdminRepository(Protocol):
    """Port for admin persistence."""

    async def get_by_id(self, admin_id: UUID, *, for_update: bool = False) -> Admin | None: ...

    async def get_by_email(self, email: str) -> Admin | None: ...

    async def list(
        self,
        *,
        admin_filter: AdminFilter | None = None,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Admin], str | None]: ...

    async def create(self, admin: Admin) -> Admin: ...

    async def update(self, admin: Admin) -> None:
        """Persist admin; raises Conflict if ``admin.version`` is stale."""
        ...

    async def relabel_role_holders(self, role_id: UUID, access_level: AccessLevel) -> int:
        """Set ``access_level`` on every admin holding ``role_id``. Returns rows changed."""
        ...
