"""Best-effort audit emission."""

import structlog

from adminrbac.application.ports import AuditLogger
from adminrbac.domain.entities import AuditEntry

logger = structlog.get_logger(__name__)


async def emit_audit(audit_logger: AuditLogger | None, entry: AuditEntry) -> None:
    """Hand ``entry`` to the audit logger. Failures are logged, never raised."""
    if audit_logger is None:
        return
    try:
        await audit_logger.record(entry)
    except Exception:
        logger.warning(
            "audit.failed",
            action=entry.action,
            resource=entry.resource,
            resource_id=entry.resource_id,
            exc_info=True,
        )
