"""Clock port - wall-clock time supplied by the host."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of now() for expiry comparisons."""

    def now(self) -> datetime: ...
