"""Get / list role use cases."""

from datetime import datetime
from uuid import UUID

from adminrbac.application.dto.pagination import Page
from adminrbac.application.dto.role_dto import RoleFilter
from adminrbac.application.ports import PermissionResolver
from adminrbac.application.services.deadline import check_deadline, clamp_limit
from adminrbac.application.services.role_catalog import RoleCatalog
from adminrbac.domain.entities import Role
from adminrbac.domain.exceptions import PermissionDenied
from adminrbac.domain.value_objects import PermissionAction, Resource


class GetRoleUseCase:
    """Fetch one role by id."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_resolver: PermissionResolver,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_resolver = permission_resolver

    async def execute(self, actor_id: UUID, role_id: UUID) -> Role:
        allowed = await self._permission_resolver.can(
            actor_id, Resource.ROLE_MANAGEMENT, PermissionAction.READ
        )
        if not allowed:
            raise PermissionDenied("Admin does not have role read access")

        async with self._uow_factory() as uow:
            return await RoleCatalog(uow.roles).get_role(role_id)


class ListRolesUseCase:
    """List roles with cursor pagination."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_resolver: PermissionResolver,
        *,
        default_page_size: int = 20,
        max_page_size: int = 100,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_resolver = permission_resolver
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    async def execute(
        self,
        actor_id: UUID,
        role_filter: RoleFilter | None = None,
        *,
        cursor: str | None = None,
        limit: int | None = None,
        deadline: datetime | None = None,
    ) -> Page[Role]:
        check_deadline(deadline, "role listing")
        allowed = await self._permission_resolver.can(
            actor_id, Resource.ROLE_MANAGEMENT, PermissionAction.READ
        )
        if not allowed:
            raise PermissionDenied("Admin does not have role read access")

        check_deadline(deadline, "role listing")
        async with self._uow_factory() as uow:
            return await RoleCatalog(uow.roles).list_roles(
                role_filter,
                cursor=cursor,
                limit=clamp_limit(limit, self._default_page_size, self._max_page_size),
            )
