"""Collaborator API resources - invite, list and remove grants."""

import falcon.asgi

from collabrbac.application.ports import Clock
from collabrbac.application.use_cases.grant.invite_collaborator import InviteCollaboratorUseCase
from collabrbac.application.use_cases.grant.list_collaborators import (
    CollaboratorView,
    ListCollaboratorsUseCase,
)
from collabrbac.application.use_cases.grant.register_creator import RegisterCreatorUseCase
from collabrbac.application.use_cases.grant.remove_collaborator import RemoveCollaboratorUseCase
from collabrbac.domain.entities import Grant
from collabrbac.domain.exceptions import CollabRBACError
from collabrbac.domain.value_objects import Role
from collabrbac.interfaces.api.resources._common import (
    current_user,
    error_response,
    format_datetime,
    parse_expiry,
)


def _grant_to_dict(grant: Grant) -> dict:
    return {
        "collaborator_id": grant.collaborator_id,
        "item_id": grant.item_id,
        "role": grant.role.value,
        "granted_at": format_datetime(grant.granted_at),
        "expires_at": format_datetime(grant.expires_at),
        "granted_by": grant.granted_by,
        "active": grant.active,
    }


def _view_to_dict(view: CollaboratorView) -> dict:
    item = _grant_to_dict(view.grant)
    item["expired"] = view.expired
    item["expiring_soon"] = view.expiring_soon
    return item


class CollaboratorsResource:
    """GET/POST /v1/items/{item_id}/collaborators - list and invite collaborators.

    POST with role "creator" registers the caller as creator of a new item.
    """

    def __init__(
        self,
        list_collaborators: ListCollaboratorsUseCase,
        invite_collaborator: InviteCollaboratorUseCase,
        register_creator: RegisterCreatorUseCase,
        clock: Clock,
    ) -> None:
        self._list = list_collaborators
        self._invite = invite_collaborator
        self._register_creator = register_creator
        self._clock = clock

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return

        role_param = req.get_param("role")
        role = Role.parse(role_param) if role_param else None
        if role_param and role is None:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Unknown role: {role_param}"}
            return

        try:
            views = await self._list.execute(
                user.user_id,
                item_id,
                role=role,
                include_expired=req.get_param_as_bool("include_expired", default=False),
                include_inactive=req.get_param_as_bool("include_inactive", default=False),
            )
        except CollabRBACError as e:
            error_response(resp, e)
            return
        resp.media = {"items": [_view_to_dict(v) for v in views]}
        resp.status = falcon.HTTP_200

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return

        body = await req.get_media(default_when_empty={})
        role_value = body.get("role")
        role = Role.parse(role_value) if role_value else None
        if role_value and role is None:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Unknown role: {role_value}"}
            return

        try:
            if role == Role.CREATOR:
                grant = await self._register_creator.execute(item_id, user.user_id)
            else:
                try:
                    collaborator_id = body["collaborator_id"]
                except KeyError as e:
                    resp.status = falcon.HTTP_400
                    resp.media = {"error": f"Missing required field: {e}"}
                    return
                grant = await self._invite.execute(
                    user.user_id,
                    item_id,
                    collaborator_id,
                    role=role,
                    expires_at=parse_expiry(body, self._clock.now()),
                )
        except CollabRBACError as e:
            error_response(resp, e)
            return
        resp.media = _grant_to_dict(grant)
        resp.status = falcon.HTTP_201


class CollaboratorResource:
    """DELETE /v1/items/{item_id}/collaborators/{collaborator_id} - remove access."""

    def __init__(self, remove_collaborator: RemoveCollaboratorUseCase) -> None:
        self._remove = remove_collaborator

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        item_id: str,
        collaborator_id: str,
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return

        try:
            await self._remove.execute(user.user_id, item_id, collaborator_id)
        except CollabRBACError as e:
            error_response(resp, e)
            return
        resp.status = falcon.HTTP_204
