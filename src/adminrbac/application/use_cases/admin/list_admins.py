"""Get / list admin use cases."""

from datetime import datetime
from uuid import UUID

from adminrbac.application.dto.admin_dto import AdminFilter
from adminrbac.application.dto.pagination import Page
from adminrbac.application.ports import PermissionResolver
from adminrbac.application.services.admin_directory import AdminDirectory
from adminrbac.application.services.deadline import check_deadline, clamp_limit
from adminrbac.domain.entities import Admin
from adminrbac.domain.exceptions import PermissionDenied
from adminrbac.domain.value_objects import PermissionAction, Resource


class GetAdminUseCase:
    def __init__(
        self,
        unit_of_work_factory: type,
        permission_resolver: PermissionResolver,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_resolver = permission_resolver

    async def execute(self, actor_id: UUID, admin_id: UUID) -> Admin:
        """Admins may always read themselves; others need userManagement.read."""
        if actor_id != admin_id:
            allowed = await self._permission_resolver.can(
                actor_id, Resource.USER_MANAGEMENT, PermissionAction.READ
            )
            if not allowed:
                raise PermissionDenied("Admin does not have user read access")

        async with self._uow_factory() as uow:
            return await AdminDirectory(uow.admins, uow.roles).get_admin(admin_id)


class ListAdminsUseCase:
    """List admins with cursor pagination and an optional caller deadline."""

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
        admin_filter: AdminFilter | None = None,
        *,
        cursor: str | None = None,
        limit: int | None = None,
        deadline: datetime | None = None,
    ) -> Page[Admin]:
        check_deadline(deadline, "admin listing")
        allowed = await self._permission_resolver.can(
            actor_id, Resource.USER_MANAGEMENT, PermissionAction.READ
        )
        if not allowed:
            raise PermissionDenied("Admin does not have user read access")

        check_deadline(deadline, "admin listing")
        async with self._uow_factory() as uow:
            items, next_cursor = await uow.admins.list(
                admin_filter=admin_filter,
                cursor=cursor,
                limit=clamp_limit(limit, self._default_page_size, self._max_page_size),
            )
        return Page(items=items, next_cursor=next_cursor)
