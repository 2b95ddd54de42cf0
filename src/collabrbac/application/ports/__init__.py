"""Application ports - interfaces for external adapters."""

from collabrbac.application.ports.clock import Clock
from collabrbac.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "Clock",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
