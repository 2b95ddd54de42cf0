"""Access policy - permission matrix and contextual authorizer."""

from collabrbac.domain.policy.authorizer import (
    AuthorizationContext,
    AuthorizationDecision,
    RoleTransitionCheck,
    authorize,
    can_change_role,
    can_complete_item,
    decide,
    ensure_can_change_role,
    is_override,
)
from collabrbac.domain.policy.permission_matrix import (
    capabilities,
    has,
    has_all,
    has_any,
    role_permissions,
)

__all__ = [
    "AuthorizationContext",
    "AuthorizationDecision",
    "RoleTransitionCheck",
    "authorize",
    "can_change_role",
    "can_complete_item",
    "capabilities",
    "decide",
    "ensure_can_change_role",
    "has",
    "has_all",
    "has_any",
    "is_override",
    "role_permissions",
]
