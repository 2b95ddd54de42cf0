"""Application data transfer objects."""

from collabrbac.application.dto.audit_filter import AuditFilter
from collabrbac.application.dto.bulk_result import BulkResult, Rejection

__all__ = [
    "AuditFilter",
    "BulkResult",
    "Rejection",
]
