"""Export audit log use case - flat records for compliance export."""

import csv
import io
import json
from dataclasses import replace

from collabrbac.application.dto import AuditFilter
from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore, require_permission
from collabrbac.domain.exceptions import ValidationError
from collabrbac.domain.value_objects import Permission

EXPORT_FIELDS = [
    "id",
    "sequence",
    "timestamp",
    "item_id",
    "actor_id",
    "action",
    "target_id",
    "old_role",
    "new_role",
    "details",
]

EXPORT_FORMATS = ("csv", "json")


def to_csv(records: list[dict]) -> str:
    """Render export records as CSV with a header row."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=EXPORT_FIELDS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(records)
    return buf.getvalue()


def to_json(records: list[dict]) -> str:
    return json.dumps(records, ensure_ascii=False)


def render(records: list[dict], fmt: str) -> str:
    if fmt == "csv":
        return to_csv(records)
    if fmt == "json":
        return to_json(records)
    raise ValidationError(f"Unsupported export format: {fmt}")


class ExportAuditLogUseCase:
    """Export the audit log of an item. Requires the export permission."""

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(
        self,
        actor_id: str,
        item_id: str,
        audit_filter: AuditFilter | None = None,
    ) -> list[dict]:
        scoped = replace(audit_filter or AuditFilter(), item_id=item_id)
        async with self._uow_factory() as uow:
            store = GrantStore(uow, item_id, self._clock, actor_id=actor_id)
            await require_permission(store, actor_id, Permission.EXPORT)
            entries = await uow.audit.query(scoped)
        return [e.as_record() for e in sorted(entries, key=lambda e: e.sequence)]
