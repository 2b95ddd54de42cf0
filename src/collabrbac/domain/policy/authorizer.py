"""Contextual authorizer - situational rules on top of the permission matrix."""

from dataclasses import dataclass

from collabrbac.domain.exceptions import InvalidRoleTransition
from collabrbac.domain.policy.permission_matrix import (
    conditional_capabilities,
    has,
    is_creator_or_admin,
)
from collabrbac.domain.value_objects import DenialReason, ItemType, Permission, Role

_ASSIGNMENT_BOUND: frozenset[Permission] = frozenset(
    {Permission.UPDATE_PROGRESS, Permission.COMPLETE}
)

NOT_CREATOR = "not creator"
CREATOR_IMMUTABLE = "creator role immutable"
CANNOT_PROMOTE_TO_CREATOR = "cannot promote to creator"


@dataclass(frozen=True)
class AuthorizationContext:
    """Item and grant facts supplied by the host for one check."""

    assigned_to_caller: bool = False
    is_private: bool = False
    caller_is_member: bool = True
    grant_expired: bool = False
    item_type: ItemType | None = None


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of a check. override marks a bypassed assignment restriction."""

    allowed: bool
    reason: DenialReason | None = None
    override: bool = False

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class RoleTransitionCheck:
    allowed: bool
    reason: str | None = None


def is_override(role: Role | str | None, assigned_to_caller: bool) -> bool:
    """Creator/Admin acting on something not assigned to them."""
    return is_creator_or_admin(role) and not assigned_to_caller


def decide(
    role: Role | str | None,
    permission: Permission,
    context: AuthorizationContext | None = None,
) -> AuthorizationDecision:
    """Evaluate permission for role in context. Pure; never raises for bad input."""
    ctx = context or AuthorizationContext()
    if ctx.grant_expired:
        return AuthorizationDecision(False, DenialReason.EXPIRED_GRANT)

    parsed = Role.parse(role)
    if parsed is None:
        return AuthorizationDecision(False, DenialReason.UNKNOWN_ROLE)

    if parsed in (Role.CREATOR, Role.ADMIN):
        if not has(parsed, permission):
            return AuthorizationDecision(False, DenialReason.NOT_IN_MATRIX)
        override = permission in _ASSIGNMENT_BOUND and is_override(
            parsed, ctx.assigned_to_caller
        )
        return AuthorizationDecision(True, override=override)

    if parsed == Role.COLLABORATOR:
        if not (has(parsed, permission) or permission in conditional_capabilities(parsed)):
            return AuthorizationDecision(False, DenialReason.NOT_IN_MATRIX)
        if ctx.is_private and not ctx.caller_is_member:
            return AuthorizationDecision(False, DenialReason.PRIVATE_ITEM)
        if (
            permission in _ASSIGNMENT_BOUND
            and ctx.item_type != ItemType.GOAL
            and not ctx.assigned_to_caller
        ):
            return AuthorizationDecision(False, DenialReason.NOT_ASSIGNED)
        return AuthorizationDecision(True)

    if parsed == Role.VIEWER:
        if not has(parsed, permission):
            return AuthorizationDecision(False, DenialReason.NOT_IN_MATRIX)
        if ctx.is_private and not ctx.caller_is_member:
            return AuthorizationDecision(False, DenialReason.PRIVATE_ITEM)
        return AuthorizationDecision(True)

    return AuthorizationDecision(False, DenialReason.UNKNOWN_ROLE)


def authorize(
    role: Role | str | None,
    permission: Permission,
    context: AuthorizationContext | None = None,
) -> bool:
    """Can role perform permission in context? False is a normal outcome."""
    return decide(role, permission, context).allowed


def can_complete_item(
    role: Role | str | None,
    item_type: ItemType,
    assigned_to_caller: bool,
) -> bool:
    return authorize(
        role,
        Permission.COMPLETE,
        AuthorizationContext(assigned_to_caller=assigned_to_caller, item_type=item_type),
    )


def can_change_role(
    actor_role: Role | str | None,
    target_current_role: Role | str | None,
    target_new_role: Role | str | None,
) -> RoleTransitionCheck:
    """Validate a role transition without mutating anything."""
    if Role.parse(actor_role) != Role.CREATOR:
        return RoleTransitionCheck(False, NOT_CREATOR)
    if Role.parse(target_current_role) == Role.CREATOR:
        return RoleTransitionCheck(False, CREATOR_IMMUTABLE)
    if Role.parse(target_new_role) == Role.CREATOR:
        return RoleTransitionCheck(False, CANNOT_PROMOTE_TO_CREATOR)
    if Role.parse(target_new_role) is None:
        return RoleTransitionCheck(False, f"unknown role: {target_new_role}")
    return RoleTransitionCheck(True)


def ensure_can_change_role(
    actor_role: Role | str | None,
    target_current_role: Role | str | None,
    target_new_role: Role | str | None,
) -> None:
    """Raise InvalidRoleTransition when can_change_role disallows the change."""
    check = can_change_role(actor_role, target_current_role, target_new_role)
    if not check.allowed:
        raise InvalidRoleTransition(check.reason or "invalid role transition")
