"""Invite collaborator use case."""

from datetime import datetime

from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore, ItemLocks, require_permission
from collabrbac.domain.entities import Grant
from collabrbac.domain.exceptions import ValidationError
from collabrbac.domain.value_objects import Permission, Role


class InviteCollaboratorUseCase:
    """Invite collaborator onto an item. Actor must be able to manage collaborators."""

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Clock,
        locks: ItemLocks,
        default_role: Role = Role.VIEWER,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock
        self._locks = locks
        self._default_role = default_role

    async def execute(
        self,
        actor_id: str,
        item_id: str,
        collaborator_id: str,
        role: Role | None = None,
        expires_at: datetime | None = None,
    ) -> Grant:
        if expires_at is not None and expires_at <= self._clock.now():
            raise ValidationError("Access expiry must be in the future")
        async with self._locks.hold(item_id):
            async with self._uow_factory() as uow:
                store = GrantStore(uow, item_id, self._clock, actor_id=actor_id)
                await require_permission(store, actor_id, Permission.MANAGE_COLLABORATORS)
                return await store.invite(
                    collaborator_id,
                    role or self._default_role,
                    expires_at=expires_at,
                )
