"""Unit tests for grant use cases."""

import asyncio
import logging
from datetime import timedelta

import pytest

from collabrbac.application.use_cases.grant.authorize_action import AuthorizeActionUseCase
from collabrbac.application.use_cases.grant.check_role_transition import (
    CheckRoleTransitionUseCase,
)
from collabrbac.application.use_cases.grant.invite_collaborator import InviteCollaboratorUseCase
from collabrbac.application.use_cases.grant.list_collaborators import ListCollaboratorsUseCase
from collabrbac.application.use_cases.grant.register_creator import RegisterCreatorUseCase
from collabrbac.application.use_cases.grant.remove_collaborator import RemoveCollaboratorUseCase
from collabrbac.domain.exceptions import (
    InvalidRoleTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from collabrbac.domain.value_objects import (
    AuditAction,
    DenialReason,
    ItemType,
    Permission,
    Role,
)

from tests.conftest import ITEM, NOW, add_grant


# --- RegisterCreatorUseCase ---


@pytest.mark.asyncio
async def test_register_creator_new_item(uow_factory, fake_uow, clock, locks) -> None:
    grant = await RegisterCreatorUseCase(uow_factory, clock, locks).execute("goal-7", "owner")
    assert grant.role == Role.CREATOR
    assert grant.granted_by == "owner"
    assert fake_uow.commits == 1


@pytest.mark.asyncio
async def test_register_creator_twice(uow_factory, clock, locks) -> None:
    with pytest.raises(InvalidRoleTransition):
        await RegisterCreatorUseCase(uow_factory, clock, locks).execute(ITEM, "admin-1")


# --- InviteCollaboratorUseCase ---


@pytest.mark.asyncio
async def test_invite_uses_default_role(uow_factory, fake_uow, clock, locks) -> None:
    use_case = InviteCollaboratorUseCase(uow_factory, clock, locks, default_role=Role.COLLABORATOR)
    grant = await use_case.execute("admin-1", ITEM, "new-1")
    assert grant.role == Role.COLLABORATOR
    assert fake_uow.audit.entries[-1].actor_id == "admin-1"


@pytest.mark.asyncio
async def test_invite_requires_manage_collaborators(uow_factory, clock, locks) -> None:
    use_case = InviteCollaboratorUseCase(uow_factory, clock, locks)
    with pytest.raises(PermissionDenied):
        await use_case.execute("collab-1", ITEM, "new-1")


@pytest.mark.asyncio
async def test_invite_past_expiry(uow_factory, clock, locks) -> None:
    use_case = InviteCollaboratorUseCase(uow_factory, clock, locks)
    with pytest.raises(ValidationError, match="future"):
        await use_case.execute("admin-1", ITEM, "new-1", expires_at=NOW - timedelta(hours=1))


@pytest.mark.asyncio
async def test_expired_admin_cannot_invite(uow_factory, fake_uow, clock, locks) -> None:
    add_grant(fake_uow, "temp-admin", Role.ADMIN, expires_at=NOW + timedelta(hours=1))
    use_case = InviteCollaboratorUseCase(uow_factory, clock, locks)
    await use_case.execute("temp-admin", ITEM, "new-1")

    clock.advance(timedelta(hours=2))
    with pytest.raises(PermissionDenied, match="expired_grant"):
        await use_case.execute("temp-admin", ITEM, "new-2")


@pytest.mark.asyncio
async def test_concurrent_invites_serialized(uow_factory, fake_uow, clock, locks) -> None:
    use_case = InviteCollaboratorUseCase(uow_factory, clock, locks)
    results = await asyncio.gather(
        use_case.execute("admin-1", ITEM, "same"),
        use_case.execute("creator-1", ITEM, "same"),
        return_exceptions=True,
    )
    assert sum(isinstance(r, ValidationError) for r in results) == 1
    assert [e.action for e in fake_uow.audit.entries] == [AuditAction.INVITED]


# --- RemoveCollaboratorUseCase ---


@pytest.mark.asyncio
async def test_remove_collaborator(uow_factory, fake_uow, clock, locks) -> None:
    removed = await RemoveCollaboratorUseCase(uow_factory, clock, locks).execute(
        "admin-1", ITEM, "viewer-1"
    )
    assert not removed.active
    assert fake_uow.audit.entries[-1].action == AuditAction.REMOVED


@pytest.mark.asyncio
async def test_remove_creator_rejected(uow_factory, clock, locks) -> None:
    with pytest.raises(InvalidRoleTransition):
        await RemoveCollaboratorUseCase(uow_factory, clock, locks).execute(
            "admin-1", ITEM, "creator-1"
        )


@pytest.mark.asyncio
async def test_remove_missing(uow_factory, clock, locks) -> None:
    with pytest.raises(NotFound):
        await RemoveCollaboratorUseCase(uow_factory, clock, locks).execute(
            "creator-1", ITEM, "ghost"
        )


# --- ListCollaboratorsUseCase ---


@pytest.mark.asyncio
async def test_list_hides_expired_by_default(uow_factory, fake_uow, clock) -> None:
    add_grant(fake_uow, "lapsed", Role.VIEWER, expires_at=NOW - timedelta(days=1))
    add_grant(fake_uow, "soon", Role.VIEWER, expires_at=NOW + timedelta(days=2))
    use_case = ListCollaboratorsUseCase(uow_factory, clock)

    views = {v.grant.collaborator_id: v for v in await use_case.execute("viewer-1", ITEM)}
    assert "lapsed" not in views
    assert views["soon"].expiring_soon
    assert not views["admin-1"].expiring_soon

    with_expired = await use_case.execute("viewer-1", ITEM, include_expired=True)
    lapsed = next(v for v in with_expired if v.grant.collaborator_id == "lapsed")
    assert lapsed.expired


@pytest.mark.asyncio
async def test_list_filters_by_role(uow_factory, clock) -> None:
    views = await ListCollaboratorsUseCase(uow_factory, clock).execute(
        "creator-1", ITEM, role=Role.COLLABORATOR
    )
    assert sorted(v.grant.collaborator_id for v in views) == ["collab-1", "collab-2"]


@pytest.mark.asyncio
async def test_list_include_inactive(uow_factory, fake_uow, clock) -> None:
    add_grant(fake_uow, "gone", Role.VIEWER, active=False)
    use_case = ListCollaboratorsUseCase(uow_factory, clock)
    assert "gone" not in {v.grant.collaborator_id for v in await use_case.execute("creator-1", ITEM)}
    views = await use_case.execute("creator-1", ITEM, include_inactive=True)
    assert "gone" in {v.grant.collaborator_id for v in views}


@pytest.mark.asyncio
async def test_list_requires_grant(uow_factory, clock) -> None:
    with pytest.raises(PermissionDenied):
        await ListCollaboratorsUseCase(uow_factory, clock).execute("stranger", ITEM)


# --- AuthorizeActionUseCase ---


@pytest.mark.asyncio
async def test_authorize_assigned_collaborator(uow_factory, clock) -> None:
    decision = await AuthorizeActionUseCase(uow_factory, clock).execute(
        "collab-1",
        ITEM,
        Permission.COMPLETE,
        item_type=ItemType.MILESTONE,
        assigned_collaborator_ids={"collab-1"},
    )
    assert decision.allowed


@pytest.mark.asyncio
async def test_authorize_admin_override(uow_factory, clock) -> None:
    decision = await AuthorizeActionUseCase(uow_factory, clock).execute(
        "admin-1",
        ITEM,
        Permission.COMPLETE,
        item_type=ItemType.TASK,
        assigned_collaborator_ids={"collab-1"},
    )
    assert decision.allowed
    assert decision.override


@pytest.mark.asyncio
async def test_authorize_stranger(uow_factory, clock) -> None:
    decision = await AuthorizeActionUseCase(uow_factory, clock).execute(
        "stranger", ITEM, Permission.VIEW
    )
    assert not decision.allowed
    assert decision.reason is DenialReason.UNKNOWN_ROLE


@pytest.mark.asyncio
async def test_authorize_expired_admin(uow_factory, fake_uow, clock) -> None:
    add_grant(fake_uow, "temp", Role.ADMIN, expires_at=NOW - timedelta(seconds=1))
    decision = await AuthorizeActionUseCase(uow_factory, clock).execute(
        "temp", ITEM, Permission.VIEW
    )
    assert decision.reason is DenialReason.EXPIRED_GRANT


@pytest.mark.asyncio
async def test_authorize_private_item(uow_factory, clock) -> None:
    decision = await AuthorizeActionUseCase(uow_factory, clock).execute(
        "viewer-1", ITEM, Permission.VIEW, is_private=True, caller_is_member=False
    )
    assert decision.reason is DenialReason.PRIVATE_ITEM


@pytest.mark.asyncio
async def test_authorize_logs_each_decision(uow_factory, fake_uow, clock, caplog) -> None:
    add_grant(fake_uow, "temp", Role.ADMIN, expires_at=NOW - timedelta(seconds=1))
    use_case = AuthorizeActionUseCase(uow_factory, clock)
    logger_name = "collabrbac.application.use_cases.grant.authorize_action"

    with caplog.at_level(logging.DEBUG, logger=logger_name):
        await use_case.execute("admin-1", ITEM, Permission.COMPLETE, item_type=ItemType.TASK)
        await use_case.execute("temp", ITEM, Permission.VIEW)

    allow, deny = [r for r in caplog.records if r.name == logger_name]
    assert allow.levelno == logging.DEBUG
    assert "admin-1" in allow.getMessage()
    assert "allowed=True" in allow.getMessage()
    assert "override=True" in allow.getMessage()
    assert deny.levelno == logging.INFO
    assert "reason=expired_grant" in deny.getMessage()
    assert "as admin for view" in deny.getMessage()


@pytest.mark.asyncio
async def test_authorize_never_writes(uow_factory, fake_uow, clock) -> None:
    await AuthorizeActionUseCase(uow_factory, clock).execute("admin-1", ITEM, Permission.EDIT)
    assert fake_uow.audit.entries == []
    assert fake_uow.grants.locked == []


# --- CheckRoleTransitionUseCase ---


@pytest.mark.asyncio
async def test_check_transition_creator(uow_factory, clock) -> None:
    check = await CheckRoleTransitionUseCase(uow_factory, clock).execute(
        "creator-1", ITEM, "viewer-1", "admin"
    )
    assert check.allowed


@pytest.mark.asyncio
async def test_check_transition_admin(uow_factory, clock) -> None:
    check = await CheckRoleTransitionUseCase(uow_factory, clock).execute(
        "admin-1", ITEM, "viewer-1", "admin"
    )
    assert (check.allowed, check.reason) == (False, "not creator")


@pytest.mark.asyncio
async def test_check_transition_target_creator(uow_factory, clock) -> None:
    check = await CheckRoleTransitionUseCase(uow_factory, clock).execute(
        "creator-1", ITEM, "creator-1", "viewer"
    )
    assert check.reason == "creator role immutable"


@pytest.mark.asyncio
async def test_check_transition_missing_target(uow_factory, clock) -> None:
    with pytest.raises(NotFound):
        await CheckRoleTransitionUseCase(uow_factory, clock).execute(
            "creator-1", ITEM, "ghost", "viewer"
        )
