"""Remove collaborator use case."""

from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore, ItemLocks, require_permission
from collabrbac.domain.entities import Grant
from collabrbac.domain.value_objects import Permission


class RemoveCollaboratorUseCase:
    """Deactivate a collaborator's grant. The creator can never be removed."""

    def __init__(self, unit_of_work_factory: type, clock: Clock, locks: ItemLocks) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock
        self._locks = locks

    async def execute(self, actor_id: str, item_id: str, collaborator_id: str) -> Grant:
        async with self._locks.hold(item_id):
            async with self._uow_factory() as uow:
                store = GrantStore(uow, item_id, self._clock, actor_id=actor_id)
                await require_permission(store, actor_id, Permission.MANAGE_COLLABORATORS)
                return await store.deactivate(collaborator_id)
