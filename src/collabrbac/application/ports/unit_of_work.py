"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from collabrbac.application.ports.repositories.audit_repository import AuditRepository
from collabrbac.application.ports.repositories.grant_repository import GrantRepository
from collabrbac.application.ports.repositories.role_template_repository import (
    RoleTemplateRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - a grant mutation and its audit entry share one transaction."""

    @property
    def grants(self) -> GrantRepository: ...

    @property
    def audit(self) -> AuditRepository: ...

    @property
    def templates(self) -> RoleTemplateRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
