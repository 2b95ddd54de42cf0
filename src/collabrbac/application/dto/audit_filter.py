"""Audit log query filter."""

from dataclasses import dataclass
from datetime import datetime

from collabrbac.domain.entities import AuditEntry
from collabrbac.domain.value_objects import AuditAction


@dataclass(frozen=True)
class AuditFilter:
    """All fields optional; unset fields match everything. Time range is inclusive."""

    item_id: str | None = None
    actor_id: str | None = None
    target_id: str | None = None
    action: AuditAction | None = None
    since: datetime | None = None
    until: datetime | None = None

    def matches(self, entry: AuditEntry) -> bool:
        if self.item_id is not None and entry.item_id != self.item_id:
            return False
        if self.actor_id is not None and entry.actor_id != self.actor_id:
            return False
        if self.target_id is not None and entry.target_id != self.target_id:
            return False
        if self.action is not None and entry.action != self.action:
            return False
        if self.since is not None and entry.timestamp < self.since:
            return False
        if self.until is not None and entry.timestamp > self.until:
            return False
        return True
