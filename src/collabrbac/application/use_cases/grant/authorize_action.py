"""Authorize action use case - read path for host requests."""

import logging
from collections.abc import Collection

from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore
from collabrbac.domain.policy import AuthorizationContext, AuthorizationDecision, decide
from collabrbac.domain.value_objects import DenialReason, ItemType, Permission

logger = logging.getLogger(__name__)


class AuthorizeActionUseCase:
    """Resolve the caller's grant and item facts into an authorization decision.

    Never takes item locks and never writes.
    """

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(
        self,
        caller_id: str,
        item_id: str,
        permission: Permission,
        item_type: ItemType | None = None,
        assigned_collaborator_ids: Collection[str] = (),
        is_private: bool = False,
        caller_is_member: bool | None = None,
    ) -> AuthorizationDecision:
        async with self._uow_factory() as uow:
            store = GrantStore(uow, item_id, self._clock, actor_id=caller_id)
            grant = await store.get(caller_id)

        if grant is None:
            decision = AuthorizationDecision(False, DenialReason.UNKNOWN_ROLE)
            _log_decision(caller_id, item_id, None, permission, decision)
            return decision

        context = AuthorizationContext(
            assigned_to_caller=caller_id in assigned_collaborator_ids,
            is_private=is_private,
            caller_is_member=True if caller_is_member is None else caller_is_member,
            grant_expired=grant.is_expired(self._clock.now()),
            item_type=item_type,
        )
        decision = decide(grant.role, permission, context)
        _log_decision(caller_id, item_id, grant.role, permission, decision)
        return decision


def _log_decision(caller_id, item_id, role, permission, decision) -> None:
    level = logging.DEBUG if decision.allowed else logging.INFO
    logger.log(
        level,
        "Authorize %s on item %s as %s for %s: allowed=%s reason=%s override=%s",
        caller_id,
        item_id,
        role.value if role else None,
        permission.value,
        decision.allowed,
        decision.reason.value if decision.reason else None,
        decision.override,
    )
