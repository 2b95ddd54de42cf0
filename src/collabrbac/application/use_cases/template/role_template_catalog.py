"""Role template catalog - named, reusable role assignments."""

import logging

from collabrbac.application.dto import BulkResult
from collabrbac.application.use_cases.bulk.bulk_mutation_engine import BulkMutationEngine
from collabrbac.domain.entities import RoleTemplate
from collabrbac.domain.exceptions import NotFound, ValidationError
from collabrbac.domain.value_objects import Role

logger = logging.getLogger(__name__)


class RoleTemplateCatalog:
    """Read-mostly registry of role templates.

    Applying a template only stages changes; whether each change is legal is
    decided when the engine commits.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def register(
        self,
        template_id: str,
        name: str,
        description: str = "",
        role_assignments: dict[str, str] | None = None,
    ) -> RoleTemplate:
        roles: dict[str, Role] = {}
        for collaborator_id, value in (role_assignments or {}).items():
            role = Role.parse(value)
            if role is None:
                raise ValidationError(f"Unknown role for {collaborator_id}: {value}")
            roles[collaborator_id] = role
        template = RoleTemplate(
            id=template_id,
            name=name,
            description=description,
            role_assignments=roles,
        )
        async with self._uow_factory() as uow:
            if await uow.templates.get_by_id(template_id):
                raise ValidationError(f"Role template already exists: {template_id}")
            await uow.templates.create(template)
        logger.info("Registered role template %s", template_id)
        return template

    async def get(self, template_id: str) -> RoleTemplate:
        async with self._uow_factory() as uow:
            template = await uow.templates.get_by_id(template_id)
        if template is None:
            raise NotFound("RoleTemplate", template_id)
        return template

    async def list_templates(self) -> list[RoleTemplate]:
        async with self._uow_factory() as uow:
            return await uow.templates.list_all()

    async def apply(self, template_id: str, engine: BulkMutationEngine) -> BulkResult:
        """Stage template_id's assignments on engine."""
        template = await self.get(template_id)
        return await engine.apply_template(template)
