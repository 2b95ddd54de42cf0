"""Check role transition use case - pre-validation for UIs."""

from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore
from collabrbac.domain.exceptions import NotFound
from collabrbac.domain.policy import RoleTransitionCheck, can_change_role
from collabrbac.domain.value_objects import Role


class CheckRoleTransitionUseCase:
    """Would actor be allowed to move target to new_role right now?"""

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(
        self,
        actor_id: str,
        item_id: str,
        target_id: str,
        new_role: Role | str,
    ) -> RoleTransitionCheck:
        async with self._uow_factory() as uow:
            store = GrantStore(uow, item_id, self._clock, actor_id=actor_id)
            actor_role = await store.live_role(actor_id)
            target = await store.get(target_id)
        if target is None:
            raise NotFound("Collaborator", f"{item_id}/{target_id}")
        return can_change_role(actor_role, target.role, new_role)
