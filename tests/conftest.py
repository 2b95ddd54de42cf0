"""Pytest fixtures for collabrbac tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta

import pytest

from collabrbac.application.dto import AuditFilter
from collabrbac.application.services import ItemLocks
from collabrbac.domain.entities import AuditEntry, Grant, RoleTemplate
from collabrbac.domain.value_objects import Role

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
ITEM = "goal-1"


# --- Fake repositories ---


class FakeGrantRepository:
    """In-memory grant repository keyed by (item_id, collaborator_id)."""

    def __init__(self) -> None:
        self._rows: dict[tuple[str, str], Grant] = {}
        self.locked: list[str] = []

    async def get(self, item_id: str, collaborator_id: str) -> Grant | None:
        return self._rows.get((item_id, collaborator_id))

    async def get_creator(self, item_id: str) -> Grant | None:
        for g in self._rows.values():
            if g.item_id == item_id and g.role == Role.CREATOR and g.active:
                return g
        return None

    async def list_by_item(self, item_id: str, include_inactive: bool = False) -> list[Grant]:
        return [
            g
            for g in self._rows.values()
            if g.item_id == item_id and (include_inactive or g.active)
        ]

    async def save(self, grant: Grant) -> None:
        self._rows[(grant.item_id, grant.collaborator_id)] = grant

    async def lock_item(self, item_id: str) -> None:
        self.locked.append(item_id)


class FakeAuditRepository:
    """In-memory append-only audit log. Set fail_on_append to simulate an outage."""

    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []
        self.fail_on_append: Exception | None = None
        self.fail_for_targets: set[str] = set()
        self._sequence = 0

    async def next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    async def append(self, entry: AuditEntry) -> None:
        if self.fail_on_append is not None or entry.target_id in self.fail_for_targets:
            raise self.fail_on_append or RuntimeError("audit store unavailable")
        self.entries.append(entry)

    async def query(self, audit_filter: AuditFilter) -> list[AuditEntry]:
        return [e for e in self.entries if audit_filter.matches(e)]


class FakeRoleTemplateRepository:
    """In-memory role template repository."""

    def __init__(self) -> None:
        self._by_id: dict[str, RoleTemplate] = {}

    async def get_by_id(self, template_id: str) -> RoleTemplate | None:
        return self._by_id.get(template_id)

    async def list_all(self) -> list[RoleTemplate]:
        return sorted(self._by_id.values(), key=lambda t: t.name)

    async def create(self, template: RoleTemplate) -> RoleTemplate:
        self._by_id[template.id] = template
        return template


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work. rollback restores the state taken at begin."""

    def __init__(self) -> None:
        self.grants = FakeGrantRepository()
        self.audit = FakeAuditRepository()
        self.templates = FakeRoleTemplateRepository()
        self.commits = 0
        self.rollbacks = 0
        self._snapshot: tuple | None = None

    def begin(self) -> None:
        self._snapshot = (
            dict(self.grants._rows),
            list(self.audit.entries),
            dict(self.templates._by_id),
        )

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = None

    async def rollback(self) -> None:
        self.rollbacks += 1
        if self._snapshot is not None:
            grants, entries, templates = self._snapshot
            self.grants._rows = grants
            self.audit.entries = entries
            self.templates._by_id = templates
        self._snapshot = None


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory sharing one FakeUnitOfWork; commits on success, rolls back on error."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        uow.begin()
        try:
            yield uow
        except Exception:
            await uow.rollback()
            raise
        await uow.commit()

    return _factory


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


def add_grant(
    uow: FakeUnitOfWork,
    collaborator_id: str,
    role: Role,
    item_id: str = ITEM,
    expires_at: datetime | None = None,
    active: bool = True,
) -> Grant:
    """Put a grant straight into the fake store, bypassing the audit log."""
    grant = Grant(
        collaborator_id=collaborator_id,
        item_id=item_id,
        role=role,
        granted_at=NOW - timedelta(days=30),
        expires_at=expires_at,
        active=active,
    )
    uow.grants._rows[(item_id, collaborator_id)] = grant
    return grant


def seed_item(uow: FakeUnitOfWork, item_id: str = ITEM) -> None:
    """creator-1 owns item; admin-1, collab-1, collab-2 and viewer-1 share it."""
    add_grant(uow, "creator-1", Role.CREATOR, item_id)
    add_grant(uow, "admin-1", Role.ADMIN, item_id)
    add_grant(uow, "collab-1", Role.COLLABORATOR, item_id)
    add_grant(uow, "collab-2", Role.COLLABORATOR, item_id)
    add_grant(uow, "viewer-1", Role.VIEWER, item_id)


# --- Fixtures ---


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork, seeded with one shared item."""
    uow = FakeUnitOfWork()
    seed_item(uow)
    return uow


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over fake_uow."""
    return make_uow_factory(fake_uow)


@pytest.fixture
def locks() -> ItemLocks:
    return ItemLocks()
