"""Delete role use case."""

from uuid import UUID

from adminrbac.application.dto.serializers import role_to_dict
from adminrbac.application.ports import AuditLogger, PermissionResolver
from adminrbac.application.services.audit import emit_audit
from adminrbac.application.services.role_catalog import RoleCatalog
from adminrbac.application.services.role_hierarchy import RoleHierarchyValidator
from adminrbac.domain.entities import AuditEntry
from adminrbac.domain.exceptions import NotFound, PermissionDenied
from adminrbac.domain.value_objects import PermissionAction, Resource


class DeleteRoleUseCase:
    """Irreversibly remove an unreferenced custom role."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_resolver: PermissionResolver,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_resolver = permission_resolver
        self._audit_logger = audit_logger

    async def execute(self, actor_id: UUID, role_id: UUID) -> None:
        allowed = await self._permission_resolver.can(
            actor_id, Resource.ROLE_MANAGEMENT, PermissionAction.DELETE
        )
        if not allowed:
            raise PermissionDenied("Admin does not have role delete access")

        async with self._uow_factory() as uow:
            actor = await uow.admins.get_by_id(actor_id)
            if not actor:
                raise NotFound("Admin", str(actor_id))
            actor_role = await uow.roles.get_by_id(actor.role_id)
            catalog = RoleCatalog(uow.roles)
            role = await catalog.get_role(role_id)
            RoleHierarchyValidator.validate_grant_level(actor, actor_role, role.level)
            deleted = await catalog.delete_role(role_id)

        await emit_audit(
            self._audit_logger,
            AuditEntry(
                admin_id=str(actor_id),
                action="delete",
                resource="role",
                resource_id=str(role_id),
                before=role_to_dict(deleted),
            ),
        )
