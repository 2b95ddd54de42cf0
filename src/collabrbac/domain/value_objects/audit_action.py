"""Audit actions."""

from enum import StrEnum


class AuditAction(StrEnum):
    """Events recorded in the audit log."""

    ADDED = "added"
    REMOVED = "removed"
    ROLE_CHANGED = "role_changed"
    INVITED = "invited"
