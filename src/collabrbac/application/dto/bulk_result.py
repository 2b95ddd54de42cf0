"""Structured outcome of bulk role operations."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Rejection:
    """Collaborator whose change was not applied, and why."""

    id: str
    reason: str


@dataclass
class BulkResult:
    """Per-collaborator breakdown, so callers can report "N of M succeeded"."""

    succeeded: list[str] = field(default_factory=list)
    rejected: list[Rejection] = field(default_factory=list)

    def accept(self, collaborator_id: str) -> None:
        self.succeeded.append(collaborator_id)

    def reject(self, collaborator_id: str, reason: str) -> None:
        self.rejected.append(Rejection(id=collaborator_id, reason=reason))

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.rejected)

    @property
    def is_partial(self) -> bool:
        return bool(self.succeeded) and bool(self.rejected)

    def applied(self, collaborator_id: str) -> bool:
        return collaborator_id in self.succeeded

    def to_dict(self) -> dict:
        return {
            "succeeded": list(self.succeeded),
            "rejected": [{"id": r.id, "reason": r.reason} for r in self.rejected],
        }
