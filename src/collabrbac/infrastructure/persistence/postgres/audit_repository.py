"""PostgreSQL audit repository implementation."""

import psycopg
from psycopg import AsyncConnection

from collabrbac.application.dto import AuditFilter
from collabrbac.domain.entities import AuditEntry
from collabrbac.domain.exceptions import AuditWriteFailure
from collabrbac.domain.value_objects import AuditAction, Role


def _build_filter_conditions(audit_filter: AuditFilter) -> tuple[list[str], list]:
    """Build WHERE conditions and params for an AuditFilter. Time bounds are inclusive."""
    conditions: list[str] = []
    params: list = []
    for column, value in (
        ("item_id", audit_filter.item_id),
        ("actor_id", audit_filter.actor_id),
        ("target_id", audit_filter.target_id),
        ("action", audit_filter.action.value if audit_filter.action else None),
    ):
        if value is not None:
            conditions.append(f"{column} = %s")
            params.append(value)
    if audit_filter.since is not None:
        conditions.append("timestamp >= %s")
        params.append(audit_filter.since)
    if audit_filter.until is not None:
        conditions.append("timestamp <= %s")
        params.append(audit_filter.until)
    return conditions, params


class PostgresAuditRepository:
    """Append-only audit log. There is no update or delete statement here."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def next_sequence(self) -> int:
        cur = await self._conn.execute("SELECT nextval('audit_entry_seq')")
        r = await cur.fetchone()
        return r[0]

    async def append(self, entry: AuditEntry) -> None:
        """Insert entry. Any database error is an AuditWriteFailure."""
        try:
            await self._conn.execute(
                "INSERT INTO audit_entry (id, sequence, timestamp, item_id, actor_id, action, "
                "target_id, old_role, new_role, details) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    entry.id,
                    entry.sequence,
                    entry.timestamp,
                    entry.item_id,
                    entry.actor_id,
                    entry.action.value,
                    entry.target_id,
                    entry.old_role.value if entry.old_role else None,
                    entry.new_role.value if entry.new_role else None,
                    entry.details,
                ),
            )
        except psycopg.Error as e:
            raise AuditWriteFailure(f"Could not append audit entry {entry.id}: {e}") from e

    async def query(self, audit_filter: AuditFilter) -> list[AuditEntry]:
        """Filtered entries in insertion order."""
        clauses, params = _build_filter_conditions(audit_filter)
        query = (
            "SELECT id, sequence, timestamp, item_id, actor_id, action, target_id, "
            "old_role, new_role, details FROM audit_entry"
        )
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY sequence"
        cur = await self._conn.execute(query, params)
        rows = await cur.fetchall()
        return [
            AuditEntry(
                id=r[0],
                sequence=r[1],
                timestamp=r[2],
                item_id=r[3],
                actor_id=r[4],
                action=AuditAction(r[5]),
                target_id=r[6],
                old_role=Role(r[7]) if r[7] else None,
                new_role=Role(r[8]) if r[8] else None,
                details=r[9] or "",
            )
            for r in rows
        ]
