"""Admin directory - admin records, manager/sub-user relation and quotas."""

import re
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import structlog

from adminrbac.application.dto.admin_dto import AdminDraft
from adminrbac.application.ports.repositories import AdminRepository, RoleRepository
from adminrbac.domain.entities import Admin, Role
from adminrbac.domain.exceptions import (
    DuplicateName,
    InvalidStatusTransition,
    NotFound,
    PermissionDenied,
    PrivilegeEscalation,
    QuotaExceeded,
    ValidationError,
)
from adminrbac.domain.value_objects import AdminStatus, access_level_for

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class AdminDirectory:
    """Owns Admin records. Callers provide the transaction and row locks."""

    def __init__(self, admins: AdminRepository, roles: RoleRepository) -> None:
        self._admins = admins
        self._roles = roles

    async def get_admin(self, admin_id: UUID, *, for_update: bool = False) -> Admin:
        admin = await self._admins.get_by_id(admin_id, for_update=for_update)
        if not admin:
            raise NotFound("Admin", str(admin_id))
        return admin

    async def _active_role(self, role_id: UUID) -> Role:
        """Locked read, so a concurrent deactivation cannot slip past the counter."""
        role = await self._roles.get_by_id(role_id, for_update=True)
        if not role or not role.is_active:
            raise NotFound("Role", str(role_id))
        return role

    async def _check_outranks(self, actor: Admin, role: Role) -> None:
        """Actor may only hand out roles strictly below its own, unless super admin."""
        if actor.is_super_admin:
            return
        actor_role = await self._roles.get_by_id(actor.role_id)
        if actor_role is None or actor_role.level >= role.level:
            actor_level = actor_role.level if actor_role else "unknown"
            raise PrivilegeEscalation(
                f"Admin with role level {actor_level} cannot grant {role.name} "
                f"(level {role.level})"
            )

    @staticmethod
    def _require_active(actor: Admin) -> None:
        if not actor.is_active:
            raise PermissionDenied(f"Admin {actor.id} is {actor.status}")

    async def create_admin(self, draft: AdminDraft, creator: Admin) -> tuple[Admin, Admin]:
        """Create a sub-user of ``creator`` and bump its counter.

        ``creator`` must have been read with a row lock so the quota check
        and the increment cannot interleave with another creation.
        Returns (created admin, updated creator).
        """
        self._require_active(creator)
        if not creator.can_create_sub_users:
            raise PermissionDenied(f"Admin {creator.id} cannot create sub-users")
        if not creator.has_sub_user_capacity():
            raise QuotaExceeded(
                f"Admin {creator.id} reached its sub-user quota ({creator.max_sub_users})"
            )

        email = (draft.email or "").strip().lower()
        if not EMAIL_PATTERN.fullmatch(email):
            raise ValidationError(f"Invalid email address: {draft.email!r}")
        if draft.max_sub_users is not None and draft.max_sub_users < 0:
            raise ValidationError("max_sub_users must be a non-negative integer")
        if await self._admins.get_by_email(email):
            raise DuplicateName(f"An admin with email {email} already exists")

        role = await self._active_role(draft.role_id)
        await self._check_outranks(creator, role)

        can_create = (
            role.can_manage_users
            if draft.can_create_sub_users is None
            else draft.can_create_sub_users
        )
        max_sub_users = draft.max_sub_users
        if max_sub_users is None and draft.can_create_sub_users is None:
            max_sub_users = role.max_sub_users

        now = datetime.now(UTC)
        admin = Admin(
            id=uuid4(),
            email=email,
            role_id=role.id,
            access_level=access_level_for(role.level),
            status=AdminStatus.ACTIVE,
            display_name=draft.display_name,
            can_create_sub_users=can_create,
            max_sub_users=max_sub_users if can_create else None,
            created_sub_users_count=0,
            manager_id=creator.id,
            team_id=draft.team_id,
            created_at=now,
            updated_at=now,
            created_by=str(creator.id),
            updated_by=str(creator.id),
        )
        await self._admins.create(admin)

        updated_creator = replace(
            creator,
            created_sub_users_count=creator.created_sub_users_count + 1,
            updated_at=now,
        )
        await self._admins.update(updated_creator)
        await self._roles.adjust_assigned_users(role.id, 1, now)
        logger.info(
            "admin.created",
            admin_id=str(admin.id),
            manager_id=str(creator.id),
            role=role.name,
            created_sub_users_count=updated_creator.created_sub_users_count,
        )
        return admin, updated_creator

    async def assign_role(self, admin: Admin, new_role_id: UUID, assigner: Admin) -> Admin:
        """Move ``admin`` to ``new_role_id`` and re-derive its access level."""
        self._require_active(assigner)
        if admin.status == AdminStatus.INACTIVE:
            raise InvalidStatusTransition(f"Admin {admin.id} is inactive; its role cannot change")
        new_role = await self._active_role(new_role_id)
        await self._check_outranks(assigner, new_role)

        now = datetime.now(UTC)
        updated = replace(
            admin,
            role_id=new_role.id,
            access_level=access_level_for(new_role.level),
            updated_at=now,
            updated_by=str(assigner.id),
        )
        await self._admins.update(updated)
        if new_role.id != admin.role_id:
            await self._roles.adjust_assigned_users(admin.role_id, -1)
            await self._roles.adjust_assigned_users(new_role.id, 1, now)
        logger.info(
            "admin.role_assigned",
            admin_id=str(admin.id),
            role=new_role.name,
            access_level=updated.access_level.value,
            assigner_id=str(assigner.id),
        )
        return updated

    async def change_status(
        self,
        admin: Admin,
        target: AdminStatus,
        *,
        updated_by: str | None,
        reason: str | None = None,
    ) -> Admin:
        """Status transition only; counters and quotas are untouched."""
        if admin.status == target:
            return admin
        if not admin.status.can_transition_to(target):
            raise InvalidStatusTransition(
                f"Admin {admin.id} cannot go from {admin.status} to {target}"
            )
        updated = replace(
            admin,
            status=target,
            status_reason=reason,
            updated_at=datetime.now(UTC),
            updated_by=updated_by,
        )
        await self._admins.update(updated)
        logger.info(
            "admin.status_changed",
            admin_id=str(admin.id),
            from_status=admin.status.value,
            to_status=target.value,
        )
        return updated

    async def deactivate_admin(self, admin: Admin, *, updated_by: str | None, reason: str | None = None) -> Admin:
        return await self.change_status(admin, AdminStatus.INACTIVE, updated_by=updated_by, reason=reason)

    async def suspend_admin(self, admin: Admin, *, updated_by: str | None, reason: str | None = None) -> Admin:
        return await self.change_status(admin, AdminStatus.SUSPENDED, updated_by=updated_by, reason=reason)

    async def reactivate_admin(self, admin: Admin, *, updated_by: str | None, reason: str | None = None) -> Admin:
        return await self.change_status(admin, AdminStatus.ACTIVE, updated_by=updated_by, reason=reason)
