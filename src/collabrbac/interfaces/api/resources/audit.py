"""Audit log API resources."""

import falcon.asgi

from collabrbac.application.dto import AuditFilter
from collabrbac.application.use_cases.audit.export_audit_log import (
    EXPORT_FORMATS,
    ExportAuditLogUseCase,
    render,
)
from collabrbac.application.use_cases.audit.query_audit_log import QueryAuditLogUseCase
from collabrbac.domain.entities import AuditEntry
from collabrbac.domain.exceptions import CollabRBACError, ValidationError
from collabrbac.domain.value_objects import AuditAction
from collabrbac.interfaces.api.resources._common import (
    current_user,
    error_response,
    parse_datetime,
)


def _filter_from_request(req: falcon.asgi.Request) -> AuditFilter:
    action = req.get_param("action")
    try:
        parsed_action = AuditAction(action) if action else None
    except ValueError as e:
        raise ValidationError(f"Unknown audit action: {action}") from e
    return AuditFilter(
        actor_id=req.get_param("actor_id"),
        target_id=req.get_param("target_id"),
        action=parsed_action,
        since=parse_datetime(req.get_param("since")),
        until=parse_datetime(req.get_param("until")),
    )


def _entry_to_dict(entry: AuditEntry) -> dict:
    return {
        "id": str(entry.id),
        "sequence": entry.sequence,
        "timestamp": entry.timestamp.isoformat(),
        "actor_id": entry.actor_id,
        "action": entry.action.value,
        "target_id": entry.target_id,
        "old_role": entry.old_role.value if entry.old_role else None,
        "new_role": entry.new_role.value if entry.new_role else None,
        "details": entry.details,
    }


class AuditResource:
    """GET /v1/items/{item_id}/audit - permission history in insertion order."""

    def __init__(self, query_audit_log: QueryAuditLogUseCase) -> None:
        self._query = query_audit_log

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return
        try:
            entries = await self._query.execute(user.user_id, item_id, _filter_from_request(req))
        except CollabRBACError as e:
            error_response(resp, e)
            return
        resp.media = {"items": [_entry_to_dict(e) for e in entries]}
        resp.status = falcon.HTTP_200


class AuditExportResource:
    """GET /v1/items/{item_id}/audit/export?format=csv|json - compliance export."""

    def __init__(self, export_audit_log: ExportAuditLogUseCase, default_format: str = "csv") -> None:
        self._export = export_audit_log
        self._default_format = default_format

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        user = current_user(req, resp)
        if not user:
            return

        fmt = req.get_param("format") or self._default_format
        if fmt not in EXPORT_FORMATS:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Unsupported export format: {fmt}"}
            return

        try:
            records = await self._export.execute(user.user_id, item_id, _filter_from_request(req))
        except CollabRBACError as e:
            error_response(resp, e)
            return

        resp.content_type = "text/csv; charset=utf-8" if fmt == "csv" else falcon.MEDIA_JSON
        resp.downloadable_as = f"audit-{item_id}.{fmt}"
        resp.text = render(records, fmt)
        resp.status = falcon.HTTP_200
