"""PostgreSQL role template repository implementation."""

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from collabrbac.domain.entities import RoleTemplate
from collabrbac.domain.value_objects import Role


def _row_to_template(r: tuple) -> RoleTemplate:
    return RoleTemplate(
        id=r[0],
        name=r[1],
        description=r[2] or "",
        role_assignments={k: Role(v) for k, v in (r[3] or {}).items()},
    )


class PostgresRoleTemplateRepository:
    """Role template repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, template_id: str) -> RoleTemplate | None:
        cur = await self._conn.execute(
            "SELECT id, name, description, role_assignments FROM role_template WHERE id = %s",
            (template_id,),
        )
        r = await cur.fetchone()
        return _row_to_template(r) if r else None

    async def list_all(self) -> list[RoleTemplate]:
        cur = await self._conn.execute(
            "SELECT id, name, description, role_assignments FROM role_template ORDER BY name"
        )
        rows = await cur.fetchall()
        return [_row_to_template(r) for r in rows]

    async def create(self, template: RoleTemplate) -> RoleTemplate:
        await self._conn.execute(
            "INSERT INTO role_template (id, name, description, role_assignments) "
            "VALUES (%s, %s, %s, %s)",
            (
                template.id,
                template.name,
                template.description,
                Jsonb({k: v.value for k, v in template.role_assignments.items()}),
            ),
        )
        return template
