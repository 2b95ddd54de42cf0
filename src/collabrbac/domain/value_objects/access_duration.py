"""Preset lifetimes for temporary access."""

from datetime import datetime, timedelta
from enum import StrEnum


class AccessDuration(StrEnum):
    """Temporary access windows offered when staging a role change."""

    ONE_HOUR = "1h"
    ONE_DAY = "24h"
    ONE_WEEK = "7d"
    THIRTY_DAYS = "30d"
    NINETY_DAYS = "90d"

    @property
    def delta(self) -> timedelta:
        return _DELTAS[self]

    def expires_at(self, now: datetime) -> datetime:
        """Expiry instant for access starting at now."""
        return now + self.delta


_DELTAS: dict[AccessDuration, timedelta] = {
    AccessDuration.ONE_HOUR: timedelta(hours=1),
    AccessDuration.ONE_DAY: timedelta(hours=24),
    AccessDuration.ONE_WEEK: timedelta(days=7),
    AccessDuration.THIRTY_DAYS: timedelta(days=30),
    AccessDuration.NINETY_DAYS: timedelta(days=90),
}
