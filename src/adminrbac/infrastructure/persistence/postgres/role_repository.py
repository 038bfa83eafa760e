"""PostgreSQL role repository implementation."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection, errors
from psycopg.types.json import Jsonb

from adminrbac.application.dto.role_dto import RoleFilter
from adminrbac.domain.entities import Role
from adminrbac.domain.exceptions import Conflict, RoleInUse
from adminrbac.domain.value_objects import PermissionMatrix
from adminrbac.infrastructure.persistence.postgres.connection import translate_db_errors

_COLUMNS = (
    "id, name, display_name, description, level, permissions, is_system_role, "
    "is_custom_role, can_create_sub_roles, max_sub_roles, can_manage_users, max_sub_users, "
    "parent_role_id, is_active, assigned_users_count, last_assigned_at, created_at, "
    "created_by, updated_at, updated_by, version"
)


def _load_permissions(doc: Mapping | None) -> PermissionMatrix:
    """Stored documents are {resource: [actions]}; older rows still use the boolean form."""
    if not doc:
        return PermissionMatrix()
    if all(isinstance(v, list) for v in doc.values()):
        return PermissionMatrix.from_grants(doc)
    return PermissionMatrix.from_legacy(doc)


def _row_to_role(r: tuple) -> Role:
    return Role(
        id=r[0],
        name=r[1],
        display_name=r[2],
        description=r[3],
        level=r[4],
        permissions=_load_permissions(r[5]),
        is_system_role=r[6],
        is_custom_role=r[7],
        can_create_sub_roles=r[8],
        max_sub_roles=r[9],
        can_manage_users=r[10],
        max_sub_users=r[11],
        parent_role_id=r[12],
        is_active=r[13],
        assigned_users_count=r[14],
        last_assigned_at=r[15],
        created_at=r[16],
        created_by=r[17],
        updated_at=r[18],
        updated_by=r[19],
        version=r[20],
    )


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: UUID, *, for_update: bool = False) -> Role | None:
        """Get role by id. ``for_update`` locks the row until the transaction ends."""
        q = f"SELECT {_COLUMNS} FROM role WHERE id = %s"
        if for_update:
            q += " FOR UPDATE"
        with translate_db_errors("role"):
            cur = await self._conn.execute(q, (role_id,))
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def get_by_name(self, name: str, *, active_only: bool = True) -> Role | None:
        """Get role by name; the active one wins when inactive namesakes exist."""
        q = f"SELECT {_COLUMNS} FROM role WHERE name = %s"
        if active_only:
            q += " AND is_active"
        q += " ORDER BY is_active DESC, created_at DESC LIMIT 1"
        cur = await self._conn.execute(q, (name,))
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def list(
        self,
        *,
        role_filter: RoleFilter | None = None,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Role], str | None]:
        """List roles with cursor pagination."""
        f = role_filter or RoleFilter(is_active=None)
        conditions = []
        _params: list[object] = []
        if f.is_active is not None:
            conditions.append("is_active = %s")
            _params.append(f.is_active)
        if f.is_system_role is not None:
            conditions.append("is_system_role = %s")
            _params.append(f.is_system_role)
        if f.parent_role_id is not None:
            conditions.append("parent_role_id = %s")
            _params.append(f.parent_role_id)
        if f.min_level is not None:
            conditions.append("level >= %s")
            _params.append(f.min_level)
        if f.max_level is not None:
            conditions.append("level <= %s")
            _params.append(f.max_level)
        if f.name_contains:
            conditions.append("name ILIKE %s")
            _params.append(f"%{f.name_contains}%")
        if cursor:
            conditions.append("id > %s")
            _params.append(UUID(cursor))
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        params = tuple(_params) + (limit + 1,)
        q = f"SELECT {_COLUMNS} FROM role{where} ORDER BY id LIMIT %s"
        cur = await self._conn.execute(q, params)
        rows = await cur.fetchall()
        roles = [_row_to_role(r) for r in rows[:limit]]
        next_cursor = str(rows[limit - 1][0]) if len(rows) > limit else None
        return roles, next_cursor

    async def list_children(self, parent_role_id: UUID) -> list[Role]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role WHERE parent_role_id = %s ORDER BY level, name",
            (parent_role_id,),
        )
        rows = await cur.fetchall()
        return [_row_to_role(r) for r in rows]

    async def count_children(self, parent_role_id: UUID) -> int:
        cur = await self._conn.execute(
            "SELECT COUNT(*) FROM role WHERE parent_role_id = %s",
            (parent_role_id,),
        )
        r = await cur.fetchone()
        return r[0] if r else 0

    async def create(self, role: Role) -> Role:
        """Create role."""
        with translate_db_errors("role"):
            await self._conn.execute(
                f"INSERT INTO role ({_COLUMNS}) VALUES "
                "(%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    role.id,
                    role.name,
                    role.display_name,
                    role.description,
                    role.level,
                    Jsonb(role.permissions.to_dict()),
                    role.is_system_role,
                    role.is_custom_role,
                    role.can_create_sub_roles,
                    role.max_sub_roles,
                    role.can_manage_users,
                    role.max_sub_users,
                    role.parent_role_id,
                    role.is_active,
                    role.assigned_users_count,
                    role.last_assigned_at,
                    role.created_at,
                    role.created_by,
                    role.updated_at,
                    role.updated_by,
                    role.version,
                ),
            )
        return role

    async def update(self, role: Role) -> None:
        """Update role definition. Usage counters are owned by adjust_assigned_users."""
        with translate_db_errors("role"):
            cur = await self._conn.execute(
                "UPDATE role SET name=%s, display_name=%s, description=%s, level=%s, "
                "permissions=%s, can_create_sub_roles=%s, max_sub_roles=%s, "
                "can_manage_users=%s, max_sub_users=%s, parent_role_id=%s, is_active=%s, "
                "updated_at=%s, updated_by=%s, version = version + 1 "
                "WHERE id=%s AND version=%s",
                (
                    role.name,
                    role.display_name,
                    role.description,
                    role.level,
                    Jsonb(role.permissions.to_dict()),
                    role.can_create_sub_roles,
                    role.max_sub_roles,
                    role.can_manage_users,
                    role.max_sub_users,
                    role.parent_role_id,
                    role.is_active,
                    role.updated_at,
                    role.updated_by,
                    role.id,
                    role.version,
                ),
            )
        if cur.rowcount != 1:
            raise Conflict(f"Role {role.id} was modified concurrently")
        role.version += 1

    async def delete(self, role_id: UUID) -> None:
        """Hard delete role."""
        try:
            with translate_db_errors("role"):
                await self._conn.execute("DELETE FROM role WHERE id = %s", (role_id,))
        except errors.ForeignKeyViolation as e:
            raise RoleInUse(f"Role {role_id} is still referenced") from e

    async def adjust_assigned_users(
        self, role_id: UUID, delta: int, assigned_at: datetime | None = None
    ) -> None:
        with translate_db_errors("role"):
            await self._conn.execute(
                "UPDATE role SET assigned_users_count = GREATEST(assigned_users_count + %s, 0), "
                "last_assigned_at = COALESCE(%s, last_assigned_at) WHERE id = %s",
                (delta, assigned_at, role_id),
            )
