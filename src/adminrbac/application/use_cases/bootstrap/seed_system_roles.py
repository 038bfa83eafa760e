"""Install the built-in system roles and, optionally, the root super admin."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import structlog

from adminrbac.application.dto.role_dto import RoleDraft
from adminrbac.application.services.admin_directory import EMAIL_PATTERN
from adminrbac.application.services.role_catalog import RoleCatalog
from adminrbac.application.use_cases.bootstrap.system_roles import SYSTEM_ROLES
from adminrbac.domain.entities import Admin, Role
from adminrbac.domain.exceptions import NotFound, ValidationError
from adminrbac.domain.value_objects import AdminStatus, PermissionMatrix, access_level_for

logger = structlog.get_logger(__name__)

SEED_ACTOR = "system"


@dataclass
class SeedResult:
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    root_admin: Admin | None = None


@dataclass
class VerifyResult:
    present: list[Role] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing


def _draft(definition: dict) -> RoleDraft:
    permissions = PermissionMatrix.from_legacy(definition["permissions"])
    return RoleDraft(
        name=definition["name"],
        level=definition["level"],
        display_name=definition["display_name"],
        description=definition["description"],
        permissions=permissions.to_dict(),
        can_create_sub_roles=definition.get("can_create_sub_roles", False),
        can_manage_users=definition.get("can_manage_users", False),
        max_sub_users=definition.get("max_sub_users"),
    )


class SeedSystemRolesUseCase:
    """Idempotent: roles whose name already exists (in any state) are skipped."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, root_admin_email: str | None = None) -> SeedResult:
        result = SeedResult()
        async with self._uow_factory() as uow:
            catalog = RoleCatalog(uow.roles)
            for definition in SYSTEM_ROLES:
                name = definition["name"]
                if await uow.roles.get_by_name(name, active_only=False):
                    result.skipped.append(name)
                    continue
                await catalog.create_role(
                    _draft(definition), created_by=SEED_ACTOR, is_system_role=True
                )
                result.created.append(name)

            if root_admin_email:
                result.root_admin = await self._ensure_root_admin(uow, root_admin_email)

        logger.info(
            "seed.completed",
            created=len(result.created),
            skipped=len(result.skipped),
            root_admin=result.root_admin.email if result.root_admin else None,
        )
        return result

    async def _ensure_root_admin(self, uow, email: str) -> Admin:
        email = email.strip().lower()
        if not EMAIL_PATTERN.fullmatch(email):
            raise ValidationError(f"Invalid email: {email!r}")
        existing = await uow.admins.get_by_email(email)
        if existing:
            return existing

        role = await uow.roles.get_by_name("super_admin")
        if not role:
            raise NotFound("Role", "super_admin")
        now = datetime.now(UTC)
        admin = Admin(
            id=uuid4(),
            email=email,
            display_name="Root Administrator",
            role_id=role.id,
            access_level=access_level_for(role.level),
            status=AdminStatus.ACTIVE,
            can_create_sub_users=True,
            created_at=now,
            updated_at=now,
            created_by=SEED_ACTOR,
            updated_by=SEED_ACTOR,
        )
        await uow.admins.create(admin)
        await uow.roles.adjust_assigned_users(role.id, 1, assigned_at=now)
        logger.info("seed.root_admin_created", admin_id=str(admin.id), email=email)
        return admin

    async def verify(self) -> VerifyResult:
        """Report which system roles exist, ordered by level."""
        result = VerifyResult()
        async with self._uow_factory() as uow:
            for definition in SYSTEM_ROLES:
                role = await uow.roles.get_by_name(definition["name"], active_only=False)
                if role and role.is_system_role:
                    result.present.append(role)
                else:
                    result.missing.append(definition["name"])
        result.present.sort(key=lambda r: r.level)
        return result
