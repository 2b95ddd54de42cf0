"""Pending role change held in a bulk staging set."""

from dataclasses import dataclass
from datetime import datetime

from collabrbac.domain.value_objects import Role


@dataclass(frozen=True)
class PendingChange:
    """Proposed role for a collaborator, not yet committed."""

    collaborator_id: str
    new_role: Role
    new_expires_at: datetime | None = None
