"""Role hierarchy validation - parent ordering, cycles and sub-role quotas."""

from uuid import UUID

from adminrbac.application.ports.repositories import RoleRepository
from adminrbac.domain.entities import Admin, Role
from adminrbac.domain.exceptions import (
    CycleDetected,
    InvalidHierarchy,
    NotFound,
    PrivilegeEscalation,
    QuotaExceeded,
)

DEFAULT_MAX_HOPS = 64


class RoleHierarchyValidator:
    """Validates the role tree. Reads roles only, never writes."""

    def __init__(self, roles: RoleRepository, max_hops: int = DEFAULT_MAX_HOPS) -> None:
        self._roles = roles
        self._max_hops = max_hops

    async def validate_parent(self, role: Role, candidate_parent_id: UUID) -> Role:
        """Check that ``candidate_parent_id`` may be the parent of ``role``.

        The parent must be strictly more privileged (lower level) and its
        ancestor chain must neither contain ``role`` nor exceed the hop limit.
        The parent row stays locked until the transaction ends. Returns the parent.
        """
        if candidate_parent_id == role.id:
            raise CycleDetected(f"Role {role.name} cannot be its own parent")

        parent = await self._roles.get_by_id(candidate_parent_id, for_update=True)
        if not parent:
            raise NotFound("Role", str(candidate_parent_id))
        if parent.level >= role.level:
            raise InvalidHierarchy(
                f"Parent {parent.name} (level {parent.level}) must have a lower level "
                f"than {role.name} (level {role.level})"
            )

        await self._walk_ancestors(role.id, parent)
        return parent

    async def _walk_ancestors(self, role_id: UUID, start: Role) -> None:
        seen: set[UUID] = {role_id}
        current: Role | None = start
        hops = 0
        while current is not None:
            if current.id in seen:
                raise CycleDetected(f"Role hierarchy loops back at {current.name}")
            seen.add(current.id)
            if current.parent_role_id is None:
                return
            hops += 1
            if hops > self._max_hops:
                raise CycleDetected(
                    f"Role hierarchy deeper than {self._max_hops} hops above {start.name}"
                )
            current = await self._roles.get_by_id(current.parent_role_id)

    async def validate_children(self, role: Role) -> None:
        """Every existing child must stay strictly below ``role``."""
        for child in await self._roles.list_children(role.id):
            if child.level <= role.level:
                raise InvalidHierarchy(
                    f"Child role {child.name} (level {child.level}) must stay below "
                    f"{role.name} (level {role.level})"
                )

    async def validate_sub_role_creation(self, creator_role: Role, proposed_level: int) -> None:
        """Check that ``creator_role`` may create a sub-role at ``proposed_level``."""
        if proposed_level <= creator_role.level:
            raise PrivilegeEscalation(
                f"Sub-role level {proposed_level} must be greater than "
                f"{creator_role.name} level {creator_role.level}"
            )
        if not creator_role.can_create_sub_roles:
            raise QuotaExceeded(f"Role {creator_role.name} cannot create sub-roles")
        await self.validate_child_capacity(creator_role)

    async def validate_child_capacity(self, parent: Role) -> None:
        """``parent`` must have room for one more child under ``max_sub_roles``."""
        if parent.max_sub_roles is None:
            return
        existing = await self._roles.count_children(parent.id)
        if existing >= parent.max_sub_roles:
            raise QuotaExceeded(
                f"Role {parent.name} reached its sub-role quota ({parent.max_sub_roles})"
            )

    @staticmethod
    def validate_grant_level(actor: Admin, actor_role: Role | None, level: int) -> None:
        """Actor may only define or touch roles strictly below its own level."""
        if actor.is_super_admin:
            return
        if actor_role is None or actor_role.level >= level:
            actor_level = actor_role.level if actor_role else "unknown"
            raise PrivilegeEscalation(
                f"Role level {actor_level} cannot manage a role at level {level}"
            )

    @staticmethod
    def validate_reassignment(
        actor: Admin, actor_role: Role | None, target_role: Role | None
    ) -> None:
        """Actor must outrank the role the target admin currently holds."""
        if actor.is_super_admin:
            return
        if actor_role is None or target_role is None:
            raise PrivilegeEscalation("Cannot verify role ordering for reassignment")
        if actor_role.level >= target_role.level:
            raise PrivilegeEscalation(
                f"Role {actor_role.name} (level {actor_role.level}) cannot manage admins "
                f"holding {target_role.name} (level {target_role.level})"
            )
