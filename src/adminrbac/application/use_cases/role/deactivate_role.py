"""Deactivate / reactivate role use cases."""

from abc import ABC, abstractmethod
from uuid import UUID

from adminrbac.application.ports import AuditLogger, PermissionResolver
from adminrbac.application.services.audit import emit_audit
from adminrbac.application.services.role_catalog import RoleCatalog
from adminrbac.application.services.role_hierarchy import RoleHierarchyValidator
from adminrbac.domain.entities import AuditEntry, Role
from adminrbac.domain.exceptions import NotFound, PermissionDenied
from adminrbac.domain.value_objects import PermissionAction, Resource


class _RoleActivationUseCase(ABC):
    """Shared flow: permission check, grant-level check, toggle, audit."""

    _action: str

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_resolver: PermissionResolver,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_resolver = permission_resolver
        self._audit_logger = audit_logger

    @abstractmethod
    async def _apply(
        self, catalog: RoleCatalog, role_id: UUID, actor_id: UUID
    ) -> tuple[Role, Role]: ...

    async def execute(self, actor_id: UUID, role_id: UUID) -> Role:
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
            catalog = RoleCatalog(uow.roles)
            role = await catalog.get_role(role_id)
            RoleHierarchyValidator.validate_grant_level(actor, actor_role, role.level)
            before, after = await self._apply(catalog, role_id, actor_id)

        if before.is_active != after.is_active:
            await emit_audit(
                self._audit_logger,
                AuditEntry(
                    admin_id=str(actor_id),
                    action=self._action,
                    resource="role",
                    resource_id=str(role_id),
                    before={"is_active": before.is_active},
                    after={"is_active": after.is_active},
                ),
            )
        return after


class DeactivateRoleUseCase(_RoleActivationUseCase):
    """Soft-retire a role; refused while admins hold it."""

    _action = "deactivate"

    async def _apply(
        self, catalog: RoleCatalog, role_id: UUID, actor_id: UUID
    ) -> tuple[Role, Role]:
        return await catalog.deactivate_role(role_id, updated_by=str(actor_id))


class ReactivateRoleUseCase(_RoleActivationUseCase):
    """Bring a deactivated role back, if its name is still free."""

    _action = "reactivate"

    async def _apply(
        self, catalog: RoleCatalog, role_id: UUID, actor_id: UUID
    ) -> tuple[Role, Role]:
        return await catalog.reactivate_role(role_id, updated_by=str(actor_id))
