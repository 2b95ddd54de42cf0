"""Domain value objects."""

from collabrbac.domain.value_objects.access_duration import AccessDuration
from collabrbac.domain.value_objects.audit_action import AuditAction
from collabrbac.domain.value_objects.denial_reason import DenialReason
from collabrbac.domain.value_objects.item_type import ItemType
from collabrbac.domain.value_objects.permission import Permission
from collabrbac.domain.value_objects.role import (
    ASSIGNABLE_ROLES,
    ROLE_HIERARCHY,
    Role,
    is_higher_role,
)

__all__ = [
    "ASSIGNABLE_ROLES",
    "AccessDuration",
    "AuditAction",
    "DenialReason",
    "ItemType",
    "Permission",
    "ROLE_HIERARCHY",
    "Role",
    "is_higher_role",
]
