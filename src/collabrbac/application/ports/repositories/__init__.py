"""Repository ports."""

from collabrbac.application.ports.repositories.audit_repository import AuditRepository
from collabrbac.application.ports.repositories.grant_repository import GrantRepository
from collabrbac.application.ports.repositories.role_template_repository import (
    RoleTemplateRepository,
)

__all__ = [
    "AuditRepository",
    "GrantRepository",
    "RoleTemplateRepository",
]
