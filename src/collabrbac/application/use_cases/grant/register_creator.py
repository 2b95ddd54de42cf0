"""Register creator use case."""

from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore, ItemLocks
from collabrbac.domain.entities import Grant


class RegisterCreatorUseCase:
    """Record the creator of a newly created item."""

    def __init__(self, unit_of_work_factory: type, clock: Clock, locks: ItemLocks) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock
        self._locks = locks

    async def execute(self, item_id: str, creator_id: str) -> Grant:
        """Grant creator to creator_id. Fails if the item already has a creator."""
        async with self._locks.hold(item_id):
            async with self._uow_factory() as uow:
                store = GrantStore(uow, item_id, self._clock, actor_id=creator_id)
                return await store.register_creator(creator_id)
