"""Roles API resource - the permission matrix as data."""

import falcon.asgi

from collabrbac.domain.policy.permission_matrix import conditional_capabilities, role_permissions
from collabrbac.domain.value_objects import ROLE_HIERARCHY


class RolesResource:
    """GET /v1/roles - roles, ranks and permissions."""

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.media = {
            "items": [
                {
                    "role": role.value,
                    "rank": role.rank,
                    "permissions": [p.value for p in role_permissions(role)],
                    "conditional_permissions": sorted(
                        p.value for p in conditional_capabilities(role)
                    ),
                }
                for role in ROLE_HIERARCHY
            ]
        }
        resp.status = falcon.HTTP_200
