"""Registry of bulk mutation engines, one per (item, actor)."""

from collections.abc import Iterator
from contextlib import contextmanager

from collabrbac.application.ports import Clock
from collabrbac.application.services import ItemLocks
from collabrbac.application.use_cases.bulk.bulk_mutation_engine import BulkMutationEngine


class BulkEngineRegistry:
    """Keeps each actor's staging set alive between requests.

    Only engines with pending changes, or in use by a request, are retained.
    """

    def __init__(self, unit_of_work_factory: type, clock: Clock, locks: ItemLocks) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock
        self._locks = locks
        self._engines: dict[tuple[str, str], BulkMutationEngine] = {}
        self._users: dict[tuple[str, str], int] = {}

    def __len__(self) -> int:
        return len(self._engines)

    def get(self, item_id: str, actor_id: str) -> BulkMutationEngine:
        key = (item_id, actor_id)
        engine = self._engines.get(key)
        if engine is None:
            engine = self._engines[key] = BulkMutationEngine(
                unit_of_work_factory=self._uow_factory,
                clock=self._clock,
                locks=self._locks,
                item_id=item_id,
                actor_id=actor_id,
            )
        return engine

    def find(self, item_id: str, actor_id: str) -> BulkMutationEngine | None:
        """Existing engine, or None when the actor has nothing staged."""
        return self._engines.get((item_id, actor_id))

    @contextmanager
    def checkout(self, item_id: str, actor_id: str) -> Iterator[BulkMutationEngine]:
        """Engine for one request; released on exit if nothing is left staged."""
        key = (item_id, actor_id)
        engine = self.get(item_id, actor_id)
        self._users[key] = self._users.get(key, 0) + 1
        try:
            yield engine
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
            self.release(item_id, actor_id)

    def release(self, item_id: str, actor_id: str) -> None:
        """Forget an engine once its pending set is empty and no request holds it."""
        key = (item_id, actor_id)
        engine = self._engines.get(key)
        if engine is not None and not engine.pending and key not in self._users:
            del self._engines[key]
