"""Audit entry - immutable record of a grant event."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from collabrbac.domain.value_objects import AuditAction, Role


@dataclass(frozen=True)
class AuditEntry:
    """Append-only audit record. sequence gives insertion order per log."""

    id: UUID
    sequence: int
    timestamp: datetime
    item_id: str
    actor_id: str
    action: AuditAction
    target_id: str
    old_role: Role | None = None
    new_role: Role | None = None
    details: str = ""

    def as_record(self) -> dict[str, str | int]:
        """Flat record for compliance export."""
        return {
            "id": str(self.id),
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
            "item_id": self.item_id,
            "actor_id": self.actor_id,
            "action": self.action.value,
            "target_id": self.target_id,
            "old_role": self.old_role.value if self.old_role else "",
            "new_role": self.new_role.value if self.new_role else "",
            "details": self.details,
        }
