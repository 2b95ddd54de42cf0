"""Falcon ASGI application."""

import logging
from dataclasses import dataclass

import falcon
import falcon.asgi
from falcon.asgi import App

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


@dataclass
class ApiResources:
    """All resources the API routes to."""

    health: HealthResource
    roles: RolesResource
    authorize: AuthorizeResource
    role_transitions: RoleTransitionResource
    collaborators: CollaboratorsResource
    collaborator: CollaboratorResource
    pending: PendingResource
    pending_commit: PendingCommitResource
    pending_template: PendingTemplateResource
    audit: AuditResource
    audit_export: AuditExportResource
    role_templates: RoleTemplatesResource


async def _log_exception(req, resp, ex, params) -> None:
    logger.exception("Unhandled error on %s %s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def create_app(resources: ApiResources, middleware: list | None = None) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, _log_exception)

    app.add_route("/v1/health", resources.health)
    app.add_route("/v1/health/ready", resources.health, suffix="ready")
    app.add_route("/v1/roles", resources.roles)
    app.add_route("/v1/role-templates", resources.role_templates)

    item = "/v1/items/{item_id}"
    app.add_route(f"{item}/authorize", resources.authorize)
    app.add_route(f"{item}/role-transitions", resources.role_transitions)
    app.add_route(f"{item}/collaborators", resources.collaborators)
    app.add_route(f"{item}/collaborators/{{collaborator_id}}", resources.collaborator)
    app.add_route(f"{item}/pending", resources.pending)
    app.add_route(f"{item}/pending/commit", resources.pending_commit)
    app.add_route(f"{item}/pending/template", resources.pending_template)
    app.add_route(f"{item}/audit", resources.audit)
    app.add_route(f"{item}/audit/export", resources.audit_export)
    return app
