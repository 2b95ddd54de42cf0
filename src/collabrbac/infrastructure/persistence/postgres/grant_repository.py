"""PostgreSQL grant repository implementation."""

from psycopg import AsyncConnection

from collabrbac.domain.entities import Grant
from collabrbac.domain.value_objects import Role

_COLUMNS = (
    "collaborator_id, item_id, role, granted_at, expires_at, granted_by, active, deactivated_at"
)


def _row_to_grant(r: tuple) -> Grant:
    return Grant(
        collaborator_id=r[0],
        item_id=r[1],
        role=Role(r[2]),
        granted_at=r[3],
        expires_at=r[4],
        granted_by=r[5],
        active=r[6],
        deactivated_at=r[7],
    )


class PostgresGrantRepository:
    """Grant repository implementation. Rows are deactivated, never deleted."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, item_id: str, collaborator_id: str) -> Grant | None:
        """Get grant for collaborator on item, active or not."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM item_grant WHERE item_id = %s AND collaborator_id = %s",
            (item_id, collaborator_id),
        )
        r = await cur.fetchone()
        return _row_to_grant(r) if r else None

    async def get_creator(self, item_id: str) -> Grant | None:
        """Get the active creator grant of item."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM item_grant "
            "WHERE item_id = %s AND role = %s AND active",
            (item_id, Role.CREATOR.value),
        )
        r = await cur.fetchone()
        return _row_to_grant(r) if r else None

    async def list_by_item(self, item_id: str, include_inactive: bool = False) -> list[Grant]:
        """List grants on item, creator first."""
        query = f"SELECT {_COLUMNS} FROM item_grant WHERE item_id = %s"
        if not include_inactive:
            query += " AND active"
        query += " ORDER BY granted_at, collaborator_id"
        cur = await self._conn.execute(query, (item_id,))
        rows = await cur.fetchall()
        grants = [_row_to_grant(r) for r in rows]
        grants.sort(key=lambda g: -g.role.rank)
        return grants

    async def save(self, grant: Grant) -> None:
        """Insert grant or supersede the existing row for (item, collaborator)."""
        await self._conn.execute(
            f"INSERT INTO item_grant ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s) "
            "ON CONFLICT (item_id, collaborator_id) DO UPDATE SET "
            "role = EXCLUDED.role, granted_at = EXCLUDED.granted_at, "
            "expires_at = EXCLUDED.expires_at, granted_by = EXCLUDED.granted_by, "
            "active = EXCLUDED.active, deactivated_at = EXCLUDED.deactivated_at",
            (
                grant.collaborator_id,
                grant.item_id,
                grant.role.value,
                grant.granted_at,
                grant.expires_at,
                grant.granted_by,
                grant.active,
                grant.deactivated_at,
            ),
        )

    async def lock_item(self, item_id: str) -> None:
        """Serialize writers on item until the transaction ends.

        Held per write transaction only, so a multi-entry commit in another
        process may interleave between entries.
        """
        await self._conn.execute(
            "SELECT pg_advisory_xact_lock(hashtext(%s))",
            (item_id,),
        )
