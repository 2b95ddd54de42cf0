"""PostgreSQL Unit of Work implementation."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from collabrbac.infrastructure.persistence.postgres.audit_repository import (
    PostgresAuditRepository,
)
from collabrbac.infrastructure.persistence.postgres.grant_repository import (
    PostgresGrantRepository,
)
from collabrbac.infrastructure.persistence.postgres.role_template_repository import (
    PostgresRoleTemplateRepository,
)

logger = logging.getLogger(__name__)


class PostgresUnitOfWork:
    """One pooled connection, one transaction. Grant and audit writes share it."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn
        self.grants = PostgresGrantRepository(conn)
        self.audit = PostgresAuditRepository(conn)
        self.templates = PostgresRoleTemplateRepository(conn)

    async def commit(self) -> None:
        await self._conn.commit()

    async def rollback(self) -> None:
        await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool):
    """Create UnitOfWork factory (async context manager).

    Commits when the block exits cleanly; any exception rolls back every
    grant and audit write made in the block.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        async with pool.connection() as conn:
            uow = PostgresUnitOfWork(conn)
            try:
                yield uow
            except BaseException as e:
                logger.debug("Rolling back unit of work: %r", e)
                await uow.rollback()
                raise
            await uow.commit()

    return factory
