"""Update role use case."""

from uuid import UUID

from adminrbac.application.dto.role_dto import RolePatch
from adminrbac.application.dto.serializers import role_to_dict
from adminrbac.application.ports import AuditLogger, PermissionResolver
from adminrbac.application.services.audit import emit_audit
from adminrbac.application.services.role_catalog import RoleCatalog
from adminrbac.application.services.role_hierarchy import (
    DEFAULT_MAX_HOPS,
    RoleHierarchyValidator,
)
from adminrbac.domain.entities import AuditEntry, Role
from adminrbac.domain.exceptions import NotFound, PermissionDenied
from adminrbac.domain.value_objects import PermissionAction, Resource


class UpdateRoleUseCase:
    """Patch a role. System roles accept only description changes."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_resolver: PermissionResolver,
        audit_logger: AuditLogger | None = None,
        *,
        max_hops: int = DEFAULT_MAX_HOPS,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_resolver = permission_resolver
        self._audit_logger = audit_logger
        self._max_hops = max_hops

    async def execute(self, actor_id: UUID, role_id: UUID, patch: RolePatch) -> Role:
        allowed = await self._permission_resolver.can(
            actor_id, Resource.ROLE_MANAGEMENT, PermissionAction.UPDATE
        )
        if not allowed:
            raise PermissionDenied("Admin does not have role update access")

        async with self._uow_factory() as uow:
            actor = await uow.admins.get_by_id(actor_id)
            if not actor:
                raise NotFound("Admin", str(actor_id))
            actor_role = await uow.roles.get_by_id(actor.role_id)

            hierarchy = RoleHierarchyValidator(uow.roles, self._max_hops)
            catalog = RoleCatalog(uow.roles, hierarchy, uow.admins)
            current = await catalog.get_role(role_id, for_update=True)
            RoleHierarchyValidator.validate_grant_level(actor, actor_role, current.level)
            new_level = patch.touched().get("level")
            if isinstance(new_level, int):
                RoleHierarchyValidator.validate_grant_level(actor, actor_role, new_level)

            before, after = await catalog.update_role(role_id, patch, updated_by=str(actor_id))

        await emit_audit(
            self._audit_logger,
            AuditEntry(
                admin_id=str(actor_id),
                action="update",
                resource="role",
                resource_id=str(role_id),
                before=role_to_dict(before),
                after=role_to_dict(after),
            ),
        )
        return after
