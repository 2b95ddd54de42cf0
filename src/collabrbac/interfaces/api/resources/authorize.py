"""Authorization API resources."""

import falcon.asgi

from collabrbac.application.use_cases.grant.authorize_action import AuthorizeActionUseCase
from collabrbac.application.use_cases.grant.check_role_transition import (
    CheckRoleTransitionUseCase,
)
from collabrbac.domain.exceptions import CollabRBACError
from collabrbac.domain.value_objects import ItemType, Permission
from collabrbac.interfaces.api.resources._common import current_user, error_response


class AuthorizeResource:
    """POST /v1/items/{item_id}/authorize - can the caller perform a permission?"""

    def __init__(self, authorize_action: AuthorizeActionUseCase) -> None:
        self._authorize = authorize_action

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return

        body = await req.get_media(default_when_empty={})
        try:
            permission = Permission(body["permission"])
            item_type = ItemType(body["item_type"]) if body.get("item_type") else None
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return
        except ValueError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        is_private = body.get("is_private", False)
        caller_is_member = body.get("caller_is_member")
        if not isinstance(is_private, bool) or not isinstance(caller_is_member, bool | None):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "is_private and caller_is_member must be booleans"}
            return

        decision = await self._authorize.execute(
            user.user_id,
            item_id,
            permission,
            item_type=item_type,
            assigned_collaborator_ids=set(body.get("assigned_collaborator_ids") or []),
            is_private=is_private,
            caller_is_member=caller_is_member,
        )
        resp.media = {
            "allowed": decision.allowed,
            "reason": decision.reason.value if decision.reason else None,
            "override": decision.override,
        }
        resp.status = falcon.HTTP_200


class RoleTransitionResource:
    """POST /v1/items/{item_id}/role-transitions - pre-validate a role change."""

    def __init__(self, check_role_transition: CheckRoleTransitionUseCase) -> None:
        self._check = check_role_transition

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return

        body = await req.get_media(default_when_empty={})
        try:
            target_id = body["target_id"]
            new_role = body["new_role"]
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        try:
            check = await self._check.execute(user.user_id, item_id, target_id, new_role)
        except CollabRBACError as e:
            error_response(resp, e)
            return
        resp.media = {"allowed": check.allowed, "reason": check.reason}
        resp.status = falcon.HTTP_200
