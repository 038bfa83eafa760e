"""Permission resolver implementation - reads the admin and its current role."""

from uuid import UUID

from adminrbac.domain.services import resolve_permission
from adminrbac.domain.value_objects import PermissionAction, Resource


class AdminPermissionResolver:
    """Answers ``can(admin, resource, action)``. Never raises for denial.

    Each call opens its own unit of work, so it sees every transaction
    committed before it started.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def can(
        self,
        admin_id: UUID | str,
        resource: Resource | str,
        action: PermissionAction | str,
    ) -> bool:
        """Check if admin may perform action on resource."""
        try:
            admin_uuid = admin_id if isinstance(admin_id, UUID) else UUID(str(admin_id))
        except ValueError:
            return False

        async with self._uow_factory() as uow:
            admin = await uow.admins.get_by_id(admin_uuid)
            if admin is None or not admin.is_active:
                return False
            role = await uow.roles.get_by_id(admin.role_id)
            return resolve_permission(admin, role, resource, action)
