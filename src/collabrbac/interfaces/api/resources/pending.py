"""Pending role change API resources - stage, commit, discard, templates."""

import falcon.asgi

from collabrbac.application.ports import Clock
from collabrbac.application.services import GrantStore
from collabrbac.application.use_cases.bulk.engine_registry import BulkEngineRegistry
from collabrbac.application.use_cases.template.role_template_catalog import RoleTemplateCatalog
from collabrbac.domain.entities import PendingChange
from collabrbac.domain.exceptions import CollabRBACError
from collabrbac.interfaces.api.resources._common import (
    current_user,
    error_response,
    format_datetime,
    parse_expiry,
)


def _change_to_dict(change: PendingChange) -> dict:
    return {
        "collaborator_id": change.collaborator_id,
        "new_role": change.new_role.value,
        "new_expires_at": format_datetime(change.new_expires_at),
    }


class PendingResource:
    """GET/POST/DELETE /v1/items/{item_id}/pending - the caller's staging set."""

    def __init__(self, engines: BulkEngineRegistry, clock: Clock) -> None:
        self._engines = engines
        self._clock = clock

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return
        engine = self._engines.find(item_id, user.user_id)
        pending = engine.pending.values() if engine else ()
        resp.media = {"items": [_change_to_dict(c) for c in pending]}
        resp.status = falcon.HTTP_200

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        """Stage one change ({collaborator_id}) or many ({collaborator_ids})."""
        user = current_user(req, resp)
        if not user:
            return

        body = await req.get_media(default_when_empty={})
        if "role" not in body or not ("collaborator_id" in body or "collaborator_ids" in body):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "role and collaborator_id or collaborator_ids are required"}
            return

        try:
            expires_at = parse_expiry(body, self._clock.now())
            with self._engines.checkout(item_id, user.user_id) as engine:
                if "collaborator_ids" in body:
                    result = await engine.stage_many(
                        body["collaborator_ids"], body["role"], expires_at
                    )
                    resp.media = result.to_dict()
                else:
                    change = await engine.stage(body["collaborator_id"], body["role"], expires_at)
                    resp.media = {"succeeded": [change.collaborator_id], "rejected": []}
        except CollabRBACError as e:
            error_response(resp, e)
            return
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return
        with self._engines.checkout(item_id, user.user_id) as engine:
            result = engine.discard()
        resp.media = result.to_dict()
        resp.status = falcon.HTTP_200


class PendingCommitResource:
    """POST /v1/items/{item_id}/pending/commit - apply the caller's staged changes."""

    def __init__(self, engines: BulkEngineRegistry, unit_of_work_factory: type, clock: Clock) -> None:
        self._engines = engines
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return

        async with self._uow_factory() as uow:
            store = GrantStore(uow, item_id, self._clock, actor_id=user.user_id)
            actor_role = await store.live_role(user.user_id)

        try:
            with self._engines.checkout(item_id, user.user_id) as engine:
                result = await engine.commit(actor_role)
        except CollabRBACError as e:
            error_response(resp, e)
            return
        resp.media = result.to_dict()
        resp.status = falcon.HTTP_200


class PendingTemplateResource:
    """POST /v1/items/{item_id}/pending/template - stage a role template."""

    def __init__(self, engines: BulkEngineRegistry, catalog: RoleTemplateCatalog) -> None:
        self._engines = engines
        self._catalog = catalog

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return

        body = await req.get_media(default_when_empty={})
        try:
            template_id = body["template_id"]
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        try:
            with self._engines.checkout(item_id, user.user_id) as engine:
                result = await self._catalog.apply(template_id, engine)
        except CollabRBACError as e:
            error_response(resp, e)
            return
        resp.media = {**result.to_dict(), "staged": len(result.succeeded)}
        resp.status = falcon.HTTP_200
