"""PostgreSQL admin repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from adminrbac.application.dto.admin_dto import AdminFilter
from adminrbac.domain.entities import Admin
from adminrbac.domain.exceptions import Conflict
from adminrbac.domain.value_objects import AccessLevel, AdminStatus
from adminrbac.infrastructure.persistence.postgres.connection import translate_db_errors

_COLUMNS = (
    "id, email, display_name, role_id, access_level, status, status_reason, "
    "can_create_sub_users, max_sub_users, created_sub_users_count, manager_id, team_id, "
    "last_login_at, login_count, created_at, created_by, updated_at, updated_by, version"
)


def _row_to_admin(r: tuple) -> Admin:
    return Admin(
        id=r[0],
        email=r[1],
        display_name=r[2],
        role_id=r[3],
        access_level=AccessLevel(r[4]),
        status=AdminStatus(r[5]),
        status_reason=r[6],
        can_create_sub_users=r[7],
        max_sub_users=r[8],
        created_sub_users_count=r[9],
        manager_id=r[10],
        team_id=r[11],
        last_login_at=r[12],
        login_count=r[13],
        created_at=r[14],
        created_by=r[15],
        updated_at=r[16],
        updated_by=r[17],
        version=r[18],
    )


class PostgresAdminRepository:
    """Admin repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, admin_id: UUID, *, for_update: bool = False) -> Admin | None:
        """Get admin by id. ``for_update`` locks the row until the transaction ends."""
        q = f"SELECT {_COLUMNS} FROM admin WHERE id = %s"
        if for_update:
            q += " FOR UPDATE"
        with translate_db_errors("admin"):
            cur = await self._conn.execute(q, (admin_id,))
        r = await cur.fetchone()
        return _row_to_admin(r) if r else None

    async def get_by_email(self, email: str) -> Admin | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM admin WHERE email = %s",
            (email.lower(),),
        )
        r = await cur.fetchone()
        return _row_to_admin(r) if r else None

    async def list(
        self,
        *,
        admin_filter: AdminFilter | None = None,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Admin], str | None]:
        """List admins with cursor pagination."""
        f = admin_filter or AdminFilter()
        conditions = []
        _params: list[object] = []
        if f.status is not None:
            conditions.append("status = %s")
            _params.append(f.status.value)
        if f.role_id is not None:
            conditions.append("role_id = %s")
            _params.append(f.role_id)
        if f.manager_id is not None:
            conditions.append("manager_id = %s")
            _params.append(f.manager_id)
        if f.access_level is not None:
            conditions.append("access_level = %s")
            _params.append(f.access_level.value)
        if f.team_id is not None:
            conditions.append("team_id = %s")
            _params.append(f.team_id)
        if cursor:
            conditions.append("id > %s")
            _params.append(UUID(cursor))
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        params = tuple(_params) + (limit + 1,)
        q = f"SELECT {_COLUMNS} FROM admin{where} ORDER BY id LIMIT %s"
        cur = await self._conn.execute(q, params)
        rows = await cur.fetchall()
        admins = [_row_to_admin(r) for r in rows[:limit]]
        next_cursor = str(rows[limit - 1][0]) if len(rows) > limit else None
        return admins, next_cursor

    async def create(self, admin: Admin) -> Admin:
        """Create admin."""
        with translate_db_errors("admin"):
            await self._conn.execute(
                f"INSERT INTO admin ({_COLUMNS}) VALUES "
                "(%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    admin.id,
                    admin.email,
                    admin.display_name,
                    admin.role_id,
                    admin.access_level.value,
                    admin.status.value,
                    admin.status_reason,
                    admin.can_create_sub_users,
                    admin.max_sub_users,
                    admin.created_sub_users_count,
                    admin.manager_id,
                    admin.team_id,
                    admin.last_login_at,
                    admin.login_count,
                    admin.created_at,
                    admin.created_by,
                    admin.updated_at,
                    admin.updated_by,
                    admin.version,
                ),
            )
        return admin

    async def update(self, admin: Admin) -> None:
        """Update admin, guarded by the optimistic version."""
        with translate_db_errors("admin"):
            cur = await self._conn.execute(
                "UPDATE admin SET display_name=%s, role_id=%s, access_level=%s, status=%s, "
                "status_reason=%s, can_create_sub_users=%s, max_sub_users=%s, "
                "created_sub_users_count=%s, manager_id=%s, team_id=%s, last_login_at=%s, "
                "login_count=%s, updated_at=%s, updated_by=%s, version = version + 1 "
                "WHERE id=%s AND version=%s",
                (
                    admin.display_name,
                    admin.role_id,
                    admin.access_level.value,
                    admin.status.value,
                    admin.status_reason,
                    admin.can_create_sub_users,
                    admin.max_sub_users,
                    admin.created_sub_users_count,
                    admin.manager_id,
                    admin.team_id,
                    admin.last_login_at,
                    admin.login_count,
                    admin.updated_at,
                    admin.updated_by,
                    admin.id,
                    admin.version,
                ),
            )
        if cur.rowcount != 1:
            raise Conflict(f"Admin {admin.id} was modified concurrently")
        admin.version += 1

    async def relabel_role_holders(self, role_id: UUID, access_level: AccessLevel) -> int:
        """Re-derive the cached label for every holder of a role whose level moved."""
        with translate_db_errors("admin"):
            cur = await self._conn.execute(
                "UPDATE admin SET access_level=%s, updated_at=now(), version = version + 1 "
                "WHERE role_id=%s AND access_level <> %s",
                (access_level.value, role_id, access_level.value),
            )
        return cur.rowcount
