"""Grant store - the only mutable RBAC state, scoped to one item.

A GrantStore wraps the repositories of an open unit of work. Each mutation
saves the grant and then appends its audit entry inside that same
transaction (apply-then-log). If the append fails the exception propagates,
the unit of work rolls back and the grant change is discarded with it, so a
grant change is never kept without its audit record.
"""

import logging
from dataclasses import replace
from datetime import datetime
from uuid import uuid4

from collabrbac.application.ports import Clock, UnitOfWork
from collabrbac.domain.entities import AuditEntry, Grant
from collabrbac.domain.exceptions import (
    AuditWriteFailure,
    InvalidRoleTransition,
    NotFound,
    ValidationError,
)
from collabrbac.domain.policy.authorizer import (
    CANNOT_PROMOTE_TO_CREATOR,
    CREATOR_IMMUTABLE,
)
from collabrbac.domain.value_objects import ASSIGNABLE_ROLES, AuditAction, Role

logger = logging.getLogger(__name__)

CREATOR_EXISTS = "item already has a creator"


class GrantStore:
    """Grant reads and audited writes for a single item."""

    def __init__(self, uow: UnitOfWork, item_id: str, clock: Clock, actor_id: str) -> None:
        self._uow = uow
        self._item_id = item_id
        self._clock = clock
        self._actor_id = actor_id

    @property
    def item_id(self) -> str:
        return self._item_id

    @property
    def clock(self) -> Clock:
        return self._clock

    async def get(self, collaborator_id: str) -> Grant | None:
        """Active grant for collaborator, expired or not. None once removed."""
        grant = await self._uow.grants.get(self._item_id, collaborator_id)
        if grant is None or not grant.active:
            return None
        return grant

    async def live_role(self, collaborator_id: str) -> Role | None:
        """Role of an active, unexpired grant; None when the collaborator has no access."""
        grant = await self.get(collaborator_id)
        if grant is None or grant.is_expired(self._clock.now()):
            return None
        return grant.role

    async def list_grants(self, include_inactive: bool = False) -> list[Grant]:
        return await self._uow.grants.list_by_item(self._item_id, include_inactive)

    async def upsert(
        self,
        grant: Grant,
        action: AuditAction = AuditAction.ROLE_CHANGED,
        details: str = "",
    ) -> Grant:
        """Write grant, superseding any previous grant for the same collaborator."""
        if grant.item_id != self._item_id:
            raise ValidationError(f"Grant belongs to item {grant.item_id}, not {self._item_id}")
        await self._uow.grants.lock_item(self._item_id)

        previous = await self.get(grant.collaborator_id)
        if previous is not None and previous.role == Role.CREATOR:
            raise InvalidRoleTransition(CREATOR_IMMUTABLE)
        if grant.role == Role.CREATOR:
            creator = await self._uow.grants.get_creator(self._item_id)
            if creator is not None:
                raise InvalidRoleTransition(CREATOR_EXISTS)

        await self._uow.grants.save(grant)
        await self._record(
            action,
            grant.collaborator_id,
            old_role=previous.role if previous else None,
            new_role=grant.role,
            details=details,
        )
        logger.info(
            "Grant %s: %s is %s on item %s",
            action.value,
            grant.collaborator_id,
            grant.role.value,
            self._item_id,
        )
        return grant

    async def deactivate(self, collaborator_id: str, details: str = "") -> Grant:
        """Remove access without deleting the grant row."""
        await self._uow.grants.lock_item(self._item_id)
        grant = await self.get(collaborator_id)
        if grant is None:
            raise NotFound("Collaborator", f"{self._item_id}/{collaborator_id}")
        if grant.role == Role.CREATOR:
            raise InvalidRoleTransition(CREATOR_IMMUTABLE)

        removed = replace(grant, active=False, deactivated_at=self._clock.now())
        await self._uow.grants.save(removed)
        await self._record(
            AuditAction.REMOVED,
            collaborator_id,
            old_role=grant.role,
            details=details or f"removed {grant.role.value}",
        )
        logger.info("Grant removed: %s from item %s", collaborator_id, self._item_id)
        return removed

    async def register_creator(self, creator_id: str) -> Grant:
        """Record the item's creator. Allowed once per item."""
        grant = Grant(
            collaborator_id=creator_id,
            item_id=self._item_id,
            role=Role.CREATOR,
            granted_at=self._clock.now(),
            granted_by=self._actor_id,
        )
        return await self.upsert(grant, AuditAction.ADDED, details="item created")

    async def invite(
        self,
        collaborator_id: str,
        role: Role = Role.VIEWER,
        expires_at: datetime | None = None,
    ) -> Grant:
        """Grant a new collaborator access. Reactivates a previously removed one."""
        if role not in ASSIGNABLE_ROLES:
            raise InvalidRoleTransition(CANNOT_PROMOTE_TO_CREATOR)
        if await self.get(collaborator_id) is not None:
            raise ValidationError(f"{collaborator_id} is already a collaborator")
        grant = Grant(
            collaborator_id=collaborator_id,
            item_id=self._item_id,
            role=role,
            granted_at=self._clock.now(),
            expires_at=expires_at,
            granted_by=self._actor_id,
        )
        return await self.upsert(
            grant,
            AuditAction.INVITED,
            details=_describe(f"invited as {role.value}", expires_at),
        )

    async def change_role(
        self,
        collaborator_id: str,
        new_role: Role,
        expires_at: datetime | None = None,
    ) -> Grant:
        current = await self.get(collaborator_id)
        if current is None:
            raise NotFound("Collaborator", f"{self._item_id}/{collaborator_id}")
        updated = replace(
            current,
            role=new_role,
            expires_at=expires_at,
            granted_at=self._clock.now(),
            granted_by=self._actor_id,
        )
        return await self.upsert(
            updated,
            AuditAction.ROLE_CHANGED,
            details=_describe(
                f"role changed from {current.role.value} to {new_role.value}", expires_at
            ),
        )

    async def _record(
        self,
        action: AuditAction,
        target_id: str,
        old_role: Role | None = None,
        new_role: Role | None = None,
        details: str = "",
    ) -> AuditEntry:
        try:
            entry = AuditEntry(
                id=uuid4(),
                sequence=await self._uow.audit.next_sequence(),
                timestamp=self._clock.now(),
                item_id=self._item_id,
                actor_id=self._actor_id,
                action=action,
                target_id=target_id,
                old_role=old_role,
                new_role=new_role,
                details=details,
            )
            await self._uow.audit.append(entry)
        except AuditWriteFailure:
            raise
        except Exception as e:
            raise AuditWriteFailure(f"Audit write failed for {target_id}: {e}") from e
        return entry


def _describe(text: str, expires_at: datetime | None) -> str:
    if expires_at is None:
        return text
    return f"{text}, expires {expires_at.isoformat()}"
