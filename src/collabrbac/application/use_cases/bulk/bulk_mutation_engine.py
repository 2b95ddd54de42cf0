"""Bulk mutation engine - staged role changes for one item.

Changes are staged into a pending set keyed by collaborator, then committed
together. Commit is partial: each entry is validated against the
collaborator's current stored role and written in its own transaction, and
the result reports per collaborator whether the change applied.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from collabrbac.application.dto import BulkResult
from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore, ItemLocks
from collabrbac.domain.entities import PendingChange, RoleTemplate
from collabrbac.domain.exceptions import (
    AuditWriteFailure,
    CollabRBACError,
    InvalidRoleTransition,
    NotFound,
    ValidationError,
)
from collabrbac.domain.policy import can_change_role
from collabrbac.domain.policy.authorizer import (
    CANNOT_PROMOTE_TO_CREATOR,
    CREATOR_IMMUTABLE,
)
from collabrbac.domain.value_objects import Role

logger = logging.getLogger(__name__)

NOT_A_COLLABORATOR = "not a collaborator"


class BulkMutationEngine:
    """Pending role changes made by one actor on one item."""

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Clock,
        locks: ItemLocks,
        item_id: str,
        actor_id: str,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock
        self._locks = locks
        self._item_id = item_id
        self._actor_id = actor_id
        self._pending: dict[str, PendingChange] = {}

    @property
    def item_id(self) -> str:
        return self._item_id

    @property
    def actor_id(self) -> str:
        return self._actor_id

    @property
    def pending(self) -> dict[str, PendingChange]:
        """Snapshot of the staging set."""
        return dict(self._pending)

    async def stage(
        self,
        collaborator_id: str,
        new_role: Role | str,
        expires_at: datetime | None = None,
    ) -> PendingChange:
        """Stage a change, replacing any earlier one for the same collaborator.

        Raises InvalidRoleTransition when the collaborator is the creator or
        the new role is creator, NotFound when there is no such collaborator.
        """
        role = Role.parse(new_role)
        if role is None:
            raise ValidationError(f"Unknown role: {new_role}")
        if role == Role.CREATOR:
            raise InvalidRoleTransition(CANNOT_PROMOTE_TO_CREATOR)
        if expires_at is not None and expires_at <= self._clock.now():
            raise ValidationError("Access expiry must be in the future")

        async with self._uow_factory() as uow:
            current = await GrantStore(uow, self._item_id, self._clock, self._actor_id).get(
                collaborator_id
            )
        if current is None:
            raise NotFound("Collaborator", f"{self._item_id}/{collaborator_id}")
        if current.role == Role.CREATOR:
            raise InvalidRoleTransition(CREATOR_IMMUTABLE)

        change = PendingChange(collaborator_id, role, expires_at)
        self._pending[collaborator_id] = change
        return change

    async def stage_many(
        self,
        collaborator_ids: Iterable[str],
        new_role: Role | str,
        expires_at: datetime | None = None,
    ) -> BulkResult:
        """Stage the same role for several collaborators."""
        result = BulkResult()
        for collaborator_id in collaborator_ids:
            try:
                await self.stage(collaborator_id, new_role, expires_at)
            except (InvalidRoleTransition, NotFound, ValidationError) as e:
                result.reject(collaborator_id, _reason(e))
            else:
                result.accept(collaborator_id)
        return result

    async def apply_template(self, template: RoleTemplate) -> BulkResult:
        """Stage every template entry that matches a current non-creator collaborator.

        Collaborators absent from the template are left alone. The number of
        staged entries is len(result.succeeded).
        """
        async with self._uow_factory() as uow:
            store = GrantStore(uow, self._item_id, self._clock, self._actor_id)
            current = {g.collaborator_id: g for g in await store.list_grants()}

        result = BulkResult()
        for collaborator_id, role in template.role_assignments.items():
            grant = current.get(collaborator_id)
            if grant is None:
                result.reject(collaborator_id, NOT_A_COLLABORATOR)
                continue
            if grant.role == Role.CREATOR:
                result.reject(collaborator_id, CREATOR_IMMUTABLE)
                continue
            self._pending[collaborator_id] = PendingChange(collaborator_id, Role(role))
            result.accept(collaborator_id)
        logger.info(
            "Applied template %s on item %s: %d staged",
            template.id,
            self._item_id,
            len(result.succeeded),
        )
        return result

    def discard(self) -> BulkResult:
        """Drop all pending changes without touching the grant store."""
        result = BulkResult(succeeded=list(self._pending))
        self._pending.clear()
        return result

    async def commit(self, actor_role: Role | str | None) -> BulkResult:
        """Validate and write every staged change.

        Entries failing can_change_role are rejected and dropped. Passing
        entries are written one transaction each (grant plus audit entry).
        The committed entries leave the pending set afterwards, except when
        writes were attempted and every one of them failed; those entries
        stay staged. Changes staged while the commit runs are kept.
        An AuditWriteFailure stops the commit: the failing entry and every
        entry not yet processed stay staged and the error carries the
        partial result.
        """
        result = BulkResult()
        failed_writes: dict[str, PendingChange] = {}
        attempted = 0

        async with self._locks.hold(self._item_id):
            staged = list(self._pending.values())
            for index, change in enumerate(staged):
                reason = await self._validate(change, actor_role)
                if reason is not None:
                    logger.warning(
                        "Rejected role change for %s on item %s: %s",
                        change.collaborator_id,
                        self._item_id,
                        reason,
                    )
                    result.reject(change.collaborator_id, reason)
                    continue

                attempted += 1
                try:
                    await self._write(change)
                except AuditWriteFailure as e:
                    logger.exception(
                        "Audit write failed committing %s on item %s",
                        change.collaborator_id,
                        self._item_id,
                    )
                    result.reject(change.collaborator_id, _reason(e))
                    self._settle(staged, keep=staged[index:])
                    e.result = result
                    raise
                except CollabRBACError as e:
                    result.reject(change.collaborator_id, _reason(e))
                except Exception as e:
                    logger.exception(
                        "Grant write failed for %s on item %s",
                        change.collaborator_id,
                        self._item_id,
                    )
                    failed_writes[change.collaborator_id] = change
                    result.reject(change.collaborator_id, f"write failed: {e}")
                else:
                    result.accept(change.collaborator_id)

            all_failed = attempted and len(failed_writes) == attempted
            self._settle(staged, keep=failed_writes.values() if all_failed else ())

        logger.info(
            "Committed %d of %d role changes on item %s",
            len(result.succeeded),
            result.total,
            self._item_id,
        )
        return result

    def _settle(self, staged: list[PendingChange], keep: Iterable[PendingChange]) -> None:
        """Drop the committed snapshot from the staging set.

        Entries restaged while the commit was running are a different object
        and stay pending for the next commit.
        """
        kept = {id(c) for c in keep}
        for change in staged:
            if id(change) in kept:
                continue
            if self._pending.get(change.collaborator_id) is change:
                del self._pending[change.collaborator_id]

    async def _validate(self, change: PendingChange, actor_role: Role | str | None) -> str | None:
        async with self._uow_factory() as uow:
            current = await GrantStore(uow, self._item_id, self._clock, self._actor_id).get(
                change.collaborator_id
            )
        if current is None:
            return NOT_A_COLLABORATOR
        check = can_change_role(actor_role, current.role, change.new_role)
        return None if check.allowed else check.reason

    async def _write(self, change: PendingChange) -> None:
        async with self._uow_factory() as uow:
            store = GrantStore(uow, self._item_id, self._clock, self._actor_id)
            await store.change_role(
                change.collaborator_id,
                change.new_role,
                expires_at=change.new_expires_at,
            )


def _reason(error: Exception) -> str:
    return getattr(error, "reason", None) or str(error)
