"""Grant entity - collaborator role on a shared item."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from collabrbac.domain.value_objects import Role


@dataclass
class Grant:
    """Grant - collaborator holds role on item, optionally until expires_at.

    An expired grant stays in storage but carries no permissions. Removal
    deactivates the grant instead of deleting it.
    """

    collaborator_id: str
    item_id: str
    role: Role
    granted_at: datetime
    expires_at: datetime | None = None
    granted_by: str | None = None
    active: bool = True
    deactivated_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def is_expiring_soon(self, now: datetime, window: timedelta = timedelta(days=7)) -> bool:
        """True when the grant is still live but lapses within window."""
        if self.expires_at is None or self.is_expired(now):
            return False
        return self.expires_at - now <= window

    def is_live(self, now: datetime) -> bool:
        return self.active and not self.is_expired(now)


def is_expired(grant: Grant, now: datetime) -> bool:
    """Lazy expiry check; no background sweep ever evicts grants."""
    return grant.is_expired(now)
