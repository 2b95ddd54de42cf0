"""Caller access checks shared by use cases."""

from collabrbac.application.services.grant_store import GrantStore
from collabrbac.domain.exceptions import PermissionDenied
from collabrbac.domain.policy import AuthorizationContext, decide
from collabrbac.domain.value_objects import Permission, Role


async def require_permission(store: GrantStore, caller_id: str, permission: Permission) -> Role:
    """Return caller's role, or raise PermissionDenied if it lacks permission.

    Item-level operations are not assigned to anyone, so the caller counts as
    assigned; holding a grant makes the caller a member.
    """
    grant = await store.get(caller_id)
    if grant is None:
        raise PermissionDenied(f"{caller_id} has no access to {store.item_id}")
    decision = decide(
        grant.role,
        permission,
        AuthorizationContext(
            assigned_to_caller=True,
            grant_expired=grant.is_expired(store.clock.now()),
        ),
    )
    if not decision.allowed:
        reason = decision.reason.value if decision.reason else "denied"
        raise PermissionDenied(
            f"{caller_id} may not {permission.value} on {store.item_id} ({reason})"
        )
    return grant.role
