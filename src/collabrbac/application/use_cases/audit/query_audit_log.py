"""Query audit log use case."""

from dataclasses import replace

from collabrbac.application.dto import AuditFilter
from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore, require_permission
from collabrbac.domain.entities import AuditEntry
from collabrbac.domain.value_objects import Permission


class QueryAuditLogUseCase:
    """Read an item's permission history in insertion order."""

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(
        self,
        actor_id: str,
        item_id: str,
        audit_filter: AuditFilter | None = None,
    ) -> list[AuditEntry]:
        scoped = replace(audit_filter or AuditFilter(), item_id=item_id)
        async with self._uow_factory() as uow:
            store = GrantStore(uow, item_id, self._clock, actor_id=actor_id)
            await require_permission(store, actor_id, Permission.VIEW)
            entries = await uow.audit.query(scoped)
        return sorted(entries, key=lambda e: e.sequence)
