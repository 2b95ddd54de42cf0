"""Role template repository port."""

from typing import Protocol

from collabrbac.domain.entities import RoleTemplate


class RoleTemplateRepository(Protocol):
    """Port for role template persistence."""

    async def get_by_id(self, template_id: str) -> RoleTemplate | None: ...

    async def list_all(self) -> list[RoleTemplate]: ...

    async def create(self, template: RoleTemplate) -> RoleTemplate: ...
