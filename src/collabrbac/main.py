"""Application entry point and composition root."""

import logging
from datetime import timedelta

from collabrbac import __version__
from collabrbac.application.ports import Clock
from collabrbac.application.services import ItemLocks
from collabrbac.application.use_cases.audit.export_audit_log import ExportAuditLogUseCase
from collabrbac.application.use_cases.audit.query_audit_log import QueryAuditLogUseCase
from collabrbac.application.use_cases.bulk.engine_registry import BulkEngineRegistry
from collabrbac.application.use_cases.grant.authorize_action import AuthorizeActionUseCase
from collabrbac.application.use_cases.grant.check_role_transition import (
    CheckRoleTransitionUseCase,
)
from collabrbac.application.use_cases.grant.invite_collaborator import InviteCollaboratorUseCase
from collabrbac.application.use_cases.grant.list_collaborators import ListCollaboratorsUseCase
from collabrbac.application.use_cases.grant.register_creator import RegisterCreatorUseCase
from collabrbac.application.use_cases.grant.remove_collaborator import RemoveCollaboratorUseCase
from collabrbac.application.use_cases.template.role_template_catalog import RoleTemplateCatalog
from collabrbac.config import Settings, get_settings
from collabrbac.infrastructure.auth.keycloak_provider import KeycloakProvider
from collabrbac.infrastructure.clock import SystemClock
from collabrbac.infrastructure.persistence.postgres.connection import create_pool
from collabrbac.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from collabrbac.interfaces.api.app import ApiResources, create_app
from collabrbac.interfaces.api.middleware.auth import AuthMiddleware
from collabrbac.interfaces.api.middleware.cors import CORSMiddleware
from collabrbac.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from collabrbac.interfaces.api.resources.audit import AuditExportResource, AuditResource
from collabrbac.interfaces.api.resources.authorize import (
    AuthorizeResource,
    RoleTransitionResource,
)
from collabrbac.interfaces.api.resources.collaborators import (
    CollaboratorResource,
    CollaboratorsResource,
)
from collabrbac.interfaces.api.resources.health import HealthResource
from collabrbac.interfaces.api.resources.pending import (
    PendingCommitResource,
    PendingResource,
    PendingTemplateResource,
)
from collabrbac.interfaces.api.resources.roles import RolesResource
from collabrbac.interfaces.api.resources.templates import RoleTemplatesResource

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Root logging at settings.log_level; DEBUG when settings.debug is set."""
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    print(f"collabrbac v{__version__}")


def build_resources(
    uow_factory,
    clock: Clock,
    settings: Settings,
    pool=None,
) -> ApiResources:
    """Wire use cases into API resources."""
    locks = ItemLocks()
    engines = BulkEngineRegistry(uow_factory, clock, locks)
    catalog = RoleTemplateCatalog(uow_factory)

    authorize_action = AuthorizeActionUseCase(uow_factory, clock)
    check_role_transition = CheckRoleTransitionUseCase(uow_factory, clock)
    register_creator = RegisterCreatorUseCase(uow_factory, clock, locks)
    invite_collaborator = InviteCollaboratorUseCase(
        uow_factory, clock, locks, default_role=settings.default_role
    )
    remove_collaborator = RemoveCollaboratorUseCase(uow_factory, clock, locks)
    list_collaborators = ListCollaboratorsUseCase(
        uow_factory, clock, expiring_soon=timedelta(days=settings.expiring_soon_days)
    )
    query_audit_log = QueryAuditLogUseCase(uow_factory, clock)
    export_audit_log = ExportAuditLogUseCase(uow_factory, clock)

    return ApiResources(
        health=HealthResource(pool),
        roles=RolesResource(),
        authorize=AuthorizeResource(authorize_action),
        role_transitions=RoleTransitionResource(check_role_transition),
        collaborators=CollaboratorsResource(
            list_collaborators, invite_collaborator, register_creator, clock
        ),
        collaborator=CollaboratorResource(remove_collaborator),
        pending=PendingResource(engines, clock),
        pending_commit=PendingCommitResource(engines, uow_factory, clock),
        pending_template=PendingTemplateResource(engines, catalog),
        audit=AuditResource(query_audit_log),
        audit_export=AuditExportResource(
            export_audit_log, default_format=settings.audit_export_format
        ),
        role_templates=RoleTemplatesResource(catalog, admins=settings.template_admin_ids),
    )


def create_collabrbac_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings)
    pool = create_pool(settings.database_url)
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak client secret not set; all requests will be unauthenticated")

    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    resources = build_resources(uow_factory, SystemClock(), settings, pool=pool)
    logger.info("collabrbac v%s starting (%s)", __version__, settings.environment)
    return create_app(
        resources,
        middleware=[
            CORSMiddleware(cors_origins),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak),
        ],
    )


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(create_collabrbac_app(), host="0.0.0.0", port=8000)
