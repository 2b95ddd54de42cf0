"""Domain entities."""

from collabrbac.domain.entities.audit_entry import AuditEntry
from collabrbac.domain.entities.grant import Grant, is_expired
from collabrbac.domain.entities.pending_change import PendingChange
from collabrbac.domain.entities.role_template import RoleTemplate

__all__ = [
    "AuditEntry",
    "Grant",
    "PendingChange",
    "RoleTemplate",
    "is_expired",
]
