"""Provisioning guard - atomic role-assignment and sub-user/sub-role creation."""

from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import TypeVar
from uuid import UUID

import structlog

from adminrbac.application.dto.admin_dto import AdminDraft
from adminrbac.application.dto.role_dto import RoleDraft
from adminrbac.application.dto.serializers import admin_to_dict, role_to_dict
from adminrbac.application.ports import AuditLogger
from adminrbac.application.services.admin_directory import AdminDirectory
from adminrbac.application.services.audit import emit_audit
from adminrbac.application.services.role_catalog import RoleCatalog
from adminrbac.application.services.role_hierarchy import (
    DEFAULT_MAX_HOPS,
    RoleHierarchyValidator,
)
from adminrbac.domain.entities import Admin, AuditEntry, Role
from adminrbac.domain.exceptions import Conflict, NotFound, PermissionDenied
from adminrbac.domain.value_objects import AdminStatus

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ProvisioningGuard:
    """The only component performing multi-entity writes.

    Every operation runs in one unit of work; the quota owner's row is read
    with a lock so check-and-increment cannot overshoot. A transaction that
    fails with Conflict is retried from scratch up to ``max_attempts`` times.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        audit_logger: AuditLogger | None = None,
        *,
        max_attempts: int = 3,
        max_hops: int = DEFAULT_MAX_HOPS,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit_logger = audit_logger
        self._max_attempts = max(1, max_attempts)
        self._max_hops = max_hops

    async def _with_retry(self, operation: str, attempt_fn: Callable[[], Awaitable[T]]) -> T:
        for attempt in range(1, self._max_attempts + 1):
            try:
                return await attempt_fn()
            except Conflict:
                if attempt == self._max_attempts:
                    logger.warning("provisioning.conflict", operation=operation, attempts=attempt)
                    raise
                logger.info("provisioning.retry", operation=operation, attempt=attempt)
        raise AssertionError("unreachable")

    async def create_admin(self, draft: AdminDraft, creator_id: UUID) -> Admin:
        """Sub-user creation: quota check, insert and counter increment together."""

        async def attempt() -> tuple[Admin, Admin, Admin]:
            async with self._uow_factory() as uow:
                directory = AdminDirectory(uow.admins, uow.roles)
                creator = await directory.get_admin(creator_id, for_update=True)
                admin, updated_creator = await directory.create_admin(draft, creator)
            return admin, creator, updated_creator

        admin, creator, updated_creator = await self._with_retry("create_admin", attempt)
        await emit_audit(
            self._audit_logger,
            AuditEntry(
                admin_id=str(creator_id),
                action="create",
                resource="admin",
                resource_id=str(admin.id),
                before=None,
                after=admin_to_dict(admin),
            ),
        )
        await emit_audit(
            self._audit_logger,
            AuditEntry(
                admin_id=str(creator_id),
                action="update",
                resource="admin",
                resource_id=str(creator.id),
                before={"created_sub_users_count": creator.created_sub_users_count},
                after={"created_sub_users_count": updated_creator.created_sub_users_count},
            ),
        )
        return admin

    async def assign_role(self, admin_id: UUID, role_id: UUID, assigner_id: UUID) -> Admin:
        """Role-assignment: hierarchy check and reassignment commit together."""

        async def attempt() -> tuple[Admin, Admin]:
            async with self._uow_factory() as uow:
                directory = AdminDirectory(uow.admins, uow.roles)
                assigner = await directory.get_admin(assigner_id)
                admin = await directory.get_admin(admin_id, for_update=True)
                if admin.role_id != role_id:
                    assigner_role = await uow.roles.get_by_id(assigner.role_id)
                    current_role = await uow.roles.get_by_id(admin.role_id)
                    RoleHierarchyValidator.validate_reassignment(
                        assigner, assigner_role, current_role
                    )
                updated = await directory.assign_role(admin, role_id, assigner)
            return admin, updated

        before, after = await self._with_retry("assign_role", attempt)
        await emit_audit(
            self._audit_logger,
            AuditEntry(
                admin_id=str(assigner_id),
                action="assign_role",
                resource="admin",
                resource_id=str(admin_id),
                before={"role_id": str(before.role_id), "access_level": before.access_level.value},
                after={"role_id": str(after.role_id), "access_level": after.access_level.value},
            ),
        )
        return after

    async def create_sub_role(self, draft: RoleDraft, creator_id: UUID) -> Role:
        """Create a custom role under the creator's own role, within its sub-role quota."""

        async def attempt() -> Role:
            async with self._uow_factory() as uow:
                hierarchy = RoleHierarchyValidator(uow.roles, self._max_hops)
                catalog = RoleCatalog(uow.roles, hierarchy)
                directory = AdminDirectory(uow.admins, uow.roles)
                creator = await directory.get_admin(creator_id)
                if not creator.is_active:
                    raise PermissionDenied(f"Admin {creator.id} is {creator.status}")
                creator_role = await uow.roles.get_by_id(creator.role_id, for_update=True)
                if not creator_role or not creator_role.is_active:
                    raise NotFound("Role", str(creator.role_id))
                await hierarchy.validate_sub_role_creation(creator_role, draft.level)
                return await catalog.create_role(
                    replace(draft, parent_role_id=creator_role.id),
                    created_by=str(creator.id),
                )

        role = await self._with_retry("create_sub_role", attempt)
        await emit_audit(
            self._audit_logger,
            AuditEntry(
                admin_id=str(creator_id),
                action="create",
                resource="role",
                resource_id=str(role.id),
                after=role_to_dict(role),
            ),
        )
        return role

    async def _change_status(
        self,
        admin_id: UUID,
        target: AdminStatus,
        actor_id: UUID,
        reason: str | None,
    ) -> Admin:
        async def attempt() -> tuple[Admin, Admin]:
            async with self._uow_factory() as uow:
                directory = AdminDirectory(uow.admins, uow.roles)
                actor = await directory.get_admin(actor_id)
                if not actor.is_active:
                    raise PermissionDenied(f"Admin {actor.id} is {actor.status}")
                admin = await directory.get_admin(admin_id, for_update=True)
                if not actor.is_super_admin:
                    actor_role = await uow.roles.get_by_id(actor.role_id)
                    target_role = await uow.roles.get_by_id(admin.role_id)
                    RoleHierarchyValidator.validate_reassignment(actor, actor_role, target_role)
                updated = await directory.change_status(
                    admin, target, updated_by=str(actor_id), reason=reason
                )
            return admin, updated

        before, after = await self._with_retry(f"set_status_{target.value}", attempt)
        if before.status != after.status:
            await emit_audit(
                self._audit_logger,
                AuditEntry(
                    admin_id=str(actor_id),
                    action=f"status_{target.value}",
                    resource="admin",
                    resource_id=str(admin_id),
                    before={"status": before.status.value},
                    after={"status": after.status.value, "reason": reason},
                ),
            )
        return after

    async def deactivate_admin(
        self, admin_id: UUID, actor_id: UUID, reason: str | None = None
    ) -> Admin:
        """active|suspended -> inactive (terminal)."""
        return await self._change_status(admin_id, AdminStatus.INACTIVE, actor_id, reason)

    async def suspend_admin(
        self, admin_id: UUID, actor_id: UUID, reason: str | None = None
    ) -> Admin:
        return await self._change_status(admin_id, AdminStatus.SUSPENDED, actor_id, reason)

    async def reactivate_admin(
        self, admin_id: UUID, actor_id: UUID, reason: str | None = None
    ) -> Admin:
        return await self._change_status(admin_id, AdminStatus.ACTIVE, actor_id, reason)
