"""Unit tests for the contextual authorizer and role transition checks."""

import pytest

from collabrbac.domain.exceptions import InvalidRoleTransition
from collabrbac.domain.policy import (
    AuthorizationContext,
    authorize,
    can_change_role,
    can_complete_item,
    decide,
    ensure_can_change_role,
    is_override,
)
from collabrbac.domain.value_objects import DenialReason, ItemType, Permission, Role

P = Permission


class TestScenarios:
    def test_collaborator_cannot_edit(self) -> None:
        assert authorize(Role.COLLABORATOR, P.EDIT, None) is False
        assert decide(Role.COLLABORATOR, P.EDIT).reason is DenialReason.NOT_IN_MATRIX

    def test_collaborator_completes_assigned_milestone(self) -> None:
        ctx = AuthorizationContext(assigned_to_caller=True, item_type=ItemType.MILESTONE)
        assert authorize(Role.COLLABORATOR, P.COMPLETE, ctx) is True

    def test_unassigned_milestone_needs_admin_override(self) -> None:
        ctx = AuthorizationContext(assigned_to_caller=False, item_type=ItemType.MILESTONE)
        denied = decide(Role.COLLABORATOR, P.COMPLETE, ctx)
        assert not denied.allowed
        assert denied.reason is DenialReason.NOT_ASSIGNED

        allowed = decide(Role.ADMIN, P.COMPLETE, ctx)
        assert allowed.allowed
        assert allowed.override
        assert is_override(Role.ADMIN, assigned_to_caller=False)

    def test_admin_cannot_change_roles(self) -> None:
        check = can_change_role("admin", "viewer", "admin")
        assert not check.allowed
        assert check.reason == "not creator"

    @pytest.mark.parametrize("role", list(Role))
    @pytest.mark.parametrize("permission", list(Permission))
    def test_expired_grant_denies_everything(self, role: Role, permission: Permission) -> None:
        ctx = AuthorizationContext(assigned_to_caller=True, grant_expired=True)
        decision = decide(role, permission, ctx)
        assert not decision.allowed
        assert decision.reason is DenialReason.EXPIRED_GRANT


class TestDecide:
    def test_unknown_role_fails_closed(self) -> None:
        decision = decide("owner", P.VIEW)
        assert not decision
        assert decision.reason is DenialReason.UNKNOWN_ROLE
        assert decide(None, P.VIEW).reason is DenialReason.UNKNOWN_ROLE

    def test_collaborator_goal_exempt_from_assignment(self) -> None:
        ctx = AuthorizationContext(assigned_to_caller=False, item_type=ItemType.GOAL)
        assert authorize(Role.COLLABORATOR, P.COMPLETE, ctx)
        assert authorize(Role.COLLABORATOR, P.UPDATE_PROGRESS, ctx)

    def test_collaborator_unspecified_item_type_requires_assignment(self) -> None:
        ctx = AuthorizationContext(assigned_to_caller=False)
        assert decide(Role.COLLABORATOR, P.UPDATE_PROGRESS, ctx).reason is DenialReason.NOT_ASSIGNED

    def test_collaborator_assignment_does_not_gate_other_permissions(self) -> None:
        ctx = AuthorizationContext(assigned_to_caller=False, item_type=ItemType.TASK)
        assert authorize(Role.COLLABORATOR, P.CHECK_IN, ctx)
        assert authorize(Role.COLLABORATOR, P.ADD_RESOURCES, ctx)

    def test_private_item_blocks_non_members(self) -> None:
        ctx = AuthorizationContext(
            assigned_to_caller=True, is_private=True, caller_is_member=False
        )
        assert decide(Role.VIEWER, P.VIEW, ctx).reason is DenialReason.PRIVATE_ITEM
        assert decide(Role.COLLABORATOR, P.CHECK_IN, ctx).reason is DenialReason.PRIVATE_ITEM

    def test_private_item_open_to_members(self) -> None:
        ctx = AuthorizationContext(is_private=True, caller_is_member=True)
        assert authorize(Role.VIEWER, P.VIEW, ctx)

    def test_creator_and_admin_not_gated_by_privacy(self) -> None:
        ctx = AuthorizationContext(is_private=True, caller_is_member=False)
        assert authorize(Role.CREATOR, P.EDIT, ctx)
        assert authorize(Role.ADMIN, P.EDIT, ctx)

    def test_admin_lacks_delete(self) -> None:
        decision = decide(Role.ADMIN, P.DELETE)
        assert not decision
        assert decision.reason is DenialReason.NOT_IN_MATRIX

    def test_override_only_on_assignment_bound_permissions(self) -> None:
        assert not decide(Role.CREATOR, P.EDIT).override
        assert decide(Role.CREATOR, P.UPDATE_PROGRESS).override
        ctx = AuthorizationContext(assigned_to_caller=True)
        assert not decide(Role.CREATOR, P.COMPLETE, ctx).override

    def test_viewer_read_only(self) -> None:
        for permission in Permission:
            assert authorize(Role.VIEWER, permission) is (permission is P.VIEW)

    def test_idempotent(self) -> None:
        ctx = AuthorizationContext(assigned_to_caller=False, item_type=ItemType.STEP)
        first = decide(Role.COLLABORATOR, P.COMPLETE, ctx)
        second = decide(Role.COLLABORATOR, P.COMPLETE, ctx)
        assert first == second

    @pytest.mark.parametrize("permission", list(Permission))
    def test_authority_monotonic_in_rank(self, permission: Permission) -> None:
        ctx = AuthorizationContext(assigned_to_caller=True)
        viewer = authorize(Role.VIEWER, permission, ctx)
        collaborator = authorize(Role.COLLABORATOR, permission, ctx)
        admin = authorize(Role.ADMIN, permission, ctx)
        creator = authorize(Role.CREATOR, permission, ctx)
        assert viewer <= collaborator <= admin <= creator


class TestCanCompleteItem:
    def test_collaborator_assigned_task(self) -> None:
        assert can_complete_item(Role.COLLABORATOR, ItemType.TASK, assigned_to_caller=True)
        assert not can_complete_item(Role.COLLABORATOR, ItemType.TASK, assigned_to_caller=False)

    def test_viewer_never(self) -> None:
        assert not can_complete_item(Role.VIEWER, ItemType.GOAL, assigned_to_caller=True)


class TestRoleTransitions:
    def test_creator_may_change_non_creator(self) -> None:
        check = can_change_role(Role.CREATOR, Role.VIEWER, Role.ADMIN)
        assert check.allowed
        assert check.reason is None

    def test_creator_role_immutable(self) -> None:
        check = can_change_role(Role.CREATOR, Role.CREATOR, Role.ADMIN)
        assert check.reason == "creator role immutable"

    def test_cannot_promote_to_creator(self) -> None:
        check = can_change_role(Role.CREATOR, Role.ADMIN, Role.CREATOR)
        assert check.reason == "cannot promote to creator"

    def test_unknown_new_role(self) -> None:
        check = can_change_role(Role.CREATOR, Role.ADMIN, "owner")
        assert not check.allowed
        assert "owner" in check.reason

    def test_missing_actor_role(self) -> None:
        assert can_change_role(None, Role.VIEWER, Role.ADMIN).reason == "not creator"

    def test_ensure_raises_with_reason(self) -> None:
        with pytest.raises(InvalidRoleTransition) as exc_info:
            ensure_can_change_role(Role.ADMIN, Role.VIEWER, Role.COLLABORATOR)
        assert exc_info.value.reason == "not creator"
        ensure_can_change_role(Role.CREATOR, Role.VIEWER, Role.COLLABORATOR)
