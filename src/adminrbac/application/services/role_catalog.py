"""Role catalog - validation and persistence of roles and their permission matrices."""

import re
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import structlog

from adminrbac.application.dto.pagination import Page
from adminrbac.application.dto.role_dto import RoleDraft, RoleFilter, RolePatch
from adminrbac.application.ports.repositories import AdminRepository, RoleRepository
from adminrbac.application.services.role_hierarchy import RoleHierarchyValidator
from adminrbac.domain.entities import Role
from adminrbac.domain.entities.role import PROTECTED_SYSTEM_FIELDS
from adminrbac.domain.exceptions import (
    DuplicateName,
    InvalidPermissionKey,
    NotFound,
    RoleInUse,
    SystemRoleImmutable,
    ValidationError,
)
from adminrbac.domain.value_objects import PermissionMatrix
from adminrbac.domain.value_objects.access_level import access_level_for, validate_level

logger = structlog.get_logger(__name__)

NAME_PATTERN = re.compile(r"^[a-z0-9_]+$")


def _validate_name(name: object) -> str:
    if not isinstance(name, str) or not NAME_PATTERN.fullmatch(name):
        raise ValidationError(f"Role name must match [a-z0-9_]+, got {name!r}")
    return name


def _validate_quota(field_name: str, value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field_name} must be a non-negative integer, got {value!r}")
    return value


def _default_display_name(name: str) -> str:
    return name.replace("_", " ").title()


class RoleCatalog:
    """Owns Role records. Hierarchy checks are delegated to RoleHierarchyValidator.

    ``admins`` is needed only to move a held role to another access level band;
    without it such level changes are refused.
    """

    def __init__(
        self,
        roles: RoleRepository,
        hierarchy: RoleHierarchyValidator | None = None,
        admins: AdminRepository | None = None,
    ) -> None:
        self._roles = roles
        self._hierarchy = hierarchy or RoleHierarchyValidator(roles)
        self._admins = admins

    def build_role(
        self,
        draft: RoleDraft,
        *,
        created_by: str | None,
        is_system_role: bool = False,
    ) -> Role:
        """Validate a draft and turn it into an unsaved Role."""
        name = _validate_name(draft.name)
        level = validate_level(draft.level)
        permissions = PermissionMatrix.from_grants(draft.permissions)
        now = datetime.now(UTC)
        return Role(
            id=uuid4(),
            name=name,
            display_name=(draft.display_name or "").strip() or _default_display_name(name),
            description=draft.description or "",
            level=level,
            permissions=permissions,
            is_system_role=is_system_role,
            is_custom_role=not is_system_role,
            can_create_sub_roles=bool(draft.can_create_sub_roles),
            max_sub_roles=_validate_quota("max_sub_roles", draft.max_sub_roles),
            can_manage_users=bool(draft.can_manage_users),
            max_sub_users=_validate_quota("max_sub_users", draft.max_sub_users),
            parent_role_id=draft.parent_role_id,
            created_at=now,
            updated_at=now,
            created_by=created_by,
            updated_by=created_by,
        )

    async def create_role(
        self,
        draft: RoleDraft,
        *,
        created_by: str | None,
        is_system_role: bool = False,
    ) -> Role:
        """Validate and persist a new role. Returns the stored role."""
        role = self.build_role(draft, created_by=created_by, is_system_role=is_system_role)
        await self._ensure_name_available(role.name)
        if role.parent_role_id is not None:
            parent = await self._hierarchy.validate_parent(role, role.parent_role_id)
            await self._hierarchy.validate_child_capacity(parent)
        await self._roles.create(role)
        logger.info("role.created", role_id=str(role.id), name=role.name, level=role.level)
        return role

    async def get_role(self, role_id: UUID, *, for_update: bool = False) -> Role:
        role = await self._roles.get_by_id(role_id, for_update=for_update)
        if not role:
            raise NotFound("Role", str(role_id))
        return role

    async def list_roles(
        self,
        role_filter: RoleFilter | None = None,
        *,
        cursor: str | None = None,
        limit: int = 20,
    ) -> Page[Role]:
        items, next_cursor = await self._roles.list(
            role_filter=role_filter, cursor=cursor, limit=limit
        )
        return Page(items=items, next_cursor=next_cursor)

    def apply_patch(self, role: Role, patch: RolePatch, *, updated_by: str | None) -> Role:
        """Return a validated copy of ``role`` with ``patch`` applied."""
        touched = patch.touched()
        if role.is_system_role:
            protected = sorted(
                k for k, v in touched.items()
                if k in PROTECTED_SYSTEM_FIELDS and self._differs(role, k, v)
            )
            if protected:
                raise SystemRoleImmutable(
                    f"System role {role.name} cannot change: {', '.join(protected)}"
                )

        changes: dict[str, Any] = {}
        for key, value in touched.items():
            if key == "name":
                changes[key] = _validate_name(value)
            elif key == "level":
                changes[key] = validate_level(value)
            elif key == "permissions":
                changes[key] = PermissionMatrix.from_grants(value)
            elif key in ("max_sub_roles", "max_sub_users"):
                changes[key] = _validate_quota(key, value)
            elif key in ("can_create_sub_roles", "can_manage_users"):
                changes[key] = bool(value)
            elif key == "display_name":
                changes[key] = (value or "").strip() or _default_display_name(
                    changes.get("name", role.name)
                )
            elif key == "description":
                changes[key] = value or ""
            else:
                changes[key] = value
        return replace(role, **changes, updated_at=datetime.now(UTC), updated_by=updated_by)

    @staticmethod
    def _differs(role: Role, key: str, value: Any) -> bool:
        if key == "permissions":
            try:
                return PermissionMatrix.from_grants(value) != role.permissions
            except InvalidPermissionKey:
                return True
        return getattr(role, key) != value

    async def update_role(
        self, role_id: UUID, patch: RolePatch, *, updated_by: str | None
    ) -> tuple[Role, Role]:
        """Apply patch and persist. Returns (before, after)."""
        before = await self.get_role(role_id, for_update=True)
        after = self.apply_patch(before, patch, updated_by=updated_by)

        if after.name != before.name and after.is_active:
            await self._ensure_name_available(after.name, exclude=before.id)
        reparented = after.parent_role_id != before.parent_role_id
        if after.parent_role_id is not None and (reparented or after.level != before.level):
            parent = await self._hierarchy.validate_parent(after, after.parent_role_id)
            if reparented:
                await self._hierarchy.validate_child_capacity(parent)
        if after.level != before.level:
            await self._hierarchy.validate_children(after)
            await self._relabel_holders(before, after)

        await self._roles.update(after)
        logger.info("role.updated", role_id=str(role_id), fields=sorted(patch.touched()))
        return before, after

    async def deactivate_role(
        self, role_id: UUID, *, updated_by: str | None
    ) -> tuple[Role, Role]:
        """Soft-retire a role. Allowed for system roles; refused while assigned."""
        before = await self.get_role(role_id, for_update=True)
        if before.assigned_users_count > 0:
            raise RoleInUse(
                f"Role {before.name} is assigned to {before.assigned_users_count} admin(s)"
            )
        if not before.is_active:
            return before, before
        after = replace(
            before, is_active=False, updated_at=datetime.now(UTC), updated_by=updated_by
        )
        await self._roles.update(after)
        logger.info("role.deactivated", role_id=str(role_id), name=before.name)
        return before, after

    async def reactivate_role(
        self, role_id: UUID, *, updated_by: str | None
    ) -> tuple[Role, Role]:
        before = await self.get_role(role_id, for_update=True)
        if before.is_active:
            return before, before
        await self._ensure_name_available(before.name, exclude=before.id)
        after = replace(
            before, is_active=True, updated_at=datetime.now(UTC), updated_by=updated_by
        )
        await self._roles.update(after)
        logger.info("role.reactivated", role_id=str(role_id), name=before.name)
        return before, after

    async def delete_role(self, role_id: UUID) -> Role:
        """Hard-delete a custom role nobody references. Irreversible."""
        role = await self.get_role(role_id, for_update=True)
        if role.is_system_role:
            raise SystemRoleImmutable(f"System role {role.name} cannot be deleted")
        if role.assigned_users_count > 0:
            raise RoleInUse(
                f"Role {role.name} is assigned to {role.assigned_users_count} admin(s)"
            )
        if await self._roles.count_children(role.id) > 0:
            raise RoleInUse(f"Role {role.name} still has child roles")
        await self._roles.delete(role.id)
        logger.info("role.deleted", role_id=str(role_id), name=role.name)
        return role

    async def _relabel_holders(self, before: Role, after: Role) -> None:
        label = access_level_for(after.level)
        if label == access_level_for(before.level):
            return
        if self._admins is None:
            if before.assigned_users_count > 0:
                raise RoleInUse(
                    f"Role {before.name} is held by {before.assigned_users_count} admin(s); "
                    f"its access level cannot change"
                )
            return
        changed = await self._admins.relabel_role_holders(after.id, label)
        logger.info(
            "role.holders_relabelled",
            role_id=str(after.id),
            access_level=label.value,
            admins=changed,
        )

    async def _ensure_name_available(self, name: str, exclude: UUID | None = None) -> None:
        existing = await self._roles.get_by_name(name, active_only=True)
        if existing and existing.id != exclude:
            raise DuplicateName(f"An active role named {name} already exists")
