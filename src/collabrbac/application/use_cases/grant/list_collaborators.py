"""List collaborators use case."""

from dataclasses import dataclass
from datetime import timedelta

from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore, require_permission
from collabrbac.domain.entities import Grant
from collabrbac.domain.value_objects import Permission, Role


@dataclass(frozen=True)
class CollaboratorView:
    """Grant plus its expiry state at query time."""

    grant: Grant
    expired: bool
    expiring_soon: bool


class ListCollaboratorsUseCase:
    """List grants on an item, optionally filtered by role and expiry."""

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Clock,
        expiring_soon: timedelta = timedelta(days=7),
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock
        self._expiring_soon = expiring_soon

    async def execute(
        self,
        actor_id: str,
        item_id: str,
        role: Role | None = None,
        include_expired: bool = False,
        include_inactive: bool = False,
    ) -> list[CollaboratorView]:
        now = self._clock.now()
        async with self._uow_factory() as uow:
            store = GrantStore(uow, item_id, self._clock, actor_id=actor_id)
            await require_permission(store, actor_id, Permission.VIEW)
            grants = await store.list_grants(include_inactive=include_inactive)

        views = []
        for g in grants:
            if role is not None and g.role != role:
                continue
            expired = g.is_expired(now)
            if expired and not include_expired:
                continue
            views.append(
                CollaboratorView(
                    grant=g,
                    expired=expired,
                    expiring_soon=g.is_expiring_soon(now, self._expiring_soon),
                )
            )
        return views
