"""Audit logger emitting structured log events."""

import structlog

from adminrbac.domain.entities import AuditEntry


class StructlogAuditLogger:
    """Writes each entry as an ``audit`` event; useful without a database."""

    def __init__(self, logger_name: str = "adminrbac.audit") -> None:
        self._logger = structlog.get_logger(logger_name)

    async def record(self, entry: AuditEntry) -> None:
        self._logger.info(
            "audit",
            admin_id=entry.admin_id,
            action=entry.action,
            resource=entry.resource,
            resource_id=entry.resource_id,
            before=entry.before,
            after=entry.after,
            timestamp=entry.timestamp.isoformat(),
        )
