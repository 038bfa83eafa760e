"""Audit logger port."""

from typing import Protocol

from adminrbac.domain.entities import AuditEntry


class AuditLogger(Protocol):
    """Receives an entry after each committed mutation. Best-effort."""

    async def record(self, entry: AuditEntry) -> None: ...
