"""Audit repository port."""

from typing import Protocol

from collabrbac.application.dto.audit_filter import AuditFilter
from collabrbac.domain.entities import AuditEntry


class AuditRepository(Protocol):
    """Port for the append-only audit log."""

    async def next_sequence(self) -> int: ...

    async def append(self, entry: AuditEntry) -> None: ...

    async def query(self, audit_filter: AuditFilter) -> list[AuditEntry]: ...
