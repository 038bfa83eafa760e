"""Audit logger writing to the audit_log table."""

from uuid import uuid4

from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from adminrbac.domain.entities import AuditEntry


class PostgresAuditLogger:
    """Appends audit entries in their own short transaction.

    Runs after the mutation committed, so a failure here never undoes it.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def record(self, entry: AuditEntry) -> None:
        async with self._pool.connection() as conn:
            await conn.execute(
                "INSERT INTO audit_log (id, admin_id, action, resource, resource_id, "
                "before, after, created_at) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    uuid4(),
                    entry.admin_id,
                    entry.action,
                    entry.resource,
                    entry.resource_id,
                    Jsonb(entry.before) if entry.before is not None else None,
                    Jsonb(entry.after) if entry.after is not None else None,
                    entry.timestamp,
                ),
            )
