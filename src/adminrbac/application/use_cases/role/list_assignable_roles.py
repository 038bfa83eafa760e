"""Roles a requester may hand out."""

from datetime import datetime
from uuid import UUID

from adminrbac.application.dto.role_dto import RoleFilter
from adminrbac.application.services.admin_directory import AdminDirectory
from adminrbac.application.services.deadline import check_deadline
from adminrbac.domain.entities import Role
from adminrbac.domain.exceptions import NotFound, PermissionDenied

_PAGE_SIZE = 100


class ListAssignableRolesUseCase:
    """Active roles strictly below the requester's level, all of them for super_admin.

    Ordered by level, then name.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, requester_id: UUID, *, deadline: datetime | None = None) -> list[Role]:
        async with self._uow_factory() as uow:
            requester = await AdminDirectory(uow.admins, uow.roles).get_admin(requester_id)
            if not requester.is_active:
                raise PermissionDenied(f"Admin {requester.id} is {requester.status}")

            if requester.is_super_admin:
                role_filter = RoleFilter(is_active=True)
            else:
                own_role = await uow.roles.get_by_id(requester.role_id)
                if not own_role or not own_role.is_active:
                    raise NotFound("Role", str(requester.role_id))
                role_filter = RoleFilter(is_active=True, min_level=own_role.level + 1)

            roles: list[Role] = []
            cursor: str | None = None
            while True:
                check_deadline(deadline, "assignable role listing")
                items, cursor = await uow.roles.list(
                    role_filter=role_filter, cursor=cursor, limit=_PAGE_SIZE
                )
                roles.extend(items)
                if not cursor:
                    break

        return sorted(roles, key=lambda r: (r.level, r.name))
