"""Grant repository port."""

from typing import Protocol

from collabrbac.domain.entities import Grant


class GrantRepository(Protocol):
    """Port for grant persistence. Keeps one row per (item, collaborator)."""

    async def get(self, item_id: str, collaborator_id: str) -> Grant | None: ...

    async def get_creator(self, item_id: str) -> Grant | None: ...

    async def list_by_item(self, item_id: str, include_inactive: bool = False) -> list[Grant]: ...

    async def save(self, grant: Grant) -> None: ...

    async def lock_item(self, item_id: str) -> None: ...
