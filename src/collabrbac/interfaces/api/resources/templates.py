"""Role template API resources."""

import falcon.asgi

from collabrbac.application.use_cases.template.role_template_catalog import RoleTemplateCatalog
from collabrbac.domain.entities import RoleTemplate
from collabrbac.domain.exceptions import CollabRBACError, PermissionDenied
from collabrbac.interfaces.api.resources._common import current_user, error_response


def _template_to_dict(template: RoleTemplate) -> dict:
    return {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "role_assignments": {k: v.value for k, v in template.role_assignments.items()},
    }


class RoleTemplatesResource:
    """GET/POST /v1/role-templates - list and register role templates.

    Templates are global, so registering one is limited to the configured
    template admins. Any authenticated caller may list them.
    """

    def __init__(self, catalog: RoleTemplateCatalog, admins: frozenset[str] = frozenset()) -> None:
        self._catalog = catalog
        self._admins = admins

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        if not current_user(req, resp):
            return
        templates = await self._catalog.list_templates()
        resp.media = {"items": [_template_to_dict(t) for t in templates]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = current_user(req, resp)
        if not user:
            return
        if user.user_id not in self._admins:
            denied = PermissionDenied(f"{user.user_id} may not register role templates")
            error_response(resp, denied)
            return

        body = await req.get_media(default_when_empty={})
        try:
            template_id = body["id"]
            name = body["name"]
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        try:
            template = await self._catalog.register(
                template_id,
                name,
                description=body.get("description", ""),
                role_assignments=body.get("role_assignments") or {},
            )
        except CollabRBACError as e:
            error_response(resp, e)
            return
        resp.media = _template_to_dict(template)
        resp.status = falcon.HTTP_201
