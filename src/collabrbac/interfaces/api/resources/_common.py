"""Helpers shared by API resources."""

from datetime import UTC, datetime

import falcon
import falcon.asgi

from collabrbac.domain.exceptions import (
    AuditWriteFailure,
    CollabRBACError,
    InvalidRoleTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from collabrbac.domain.value_objects import AccessDuration


def current_user(req: falcon.asgi.Request, resp: falcon.asgi.Response):
    """Return req.context.user, or set 401 and return None."""
    user = getattr(req.context, "user", None)
    if not user:
        resp.status = falcon.HTTP_401
        resp.media = {"error": "Unauthorized"}
    return user


def error_response(resp: falcon.asgi.Response, ex: CollabRBACError) -> None:
    """Map domain errors to HTTP status and body."""
    if isinstance(ex, PermissionDenied):
        resp.status = falcon.HTTP_403
        resp.media = {"error": "Permission denied", "detail": str(ex)}
    elif isinstance(ex, NotFound):
        resp.status = falcon.HTTP_404
        resp.media = {"error": str(ex)}
    elif isinstance(ex, InvalidRoleTransition):
        resp.status = falcon.HTTP_409
        resp.media = {"error": "Invalid role transition", "reason": ex.reason}
    elif isinstance(ex, AuditWriteFailure):
        resp.status = falcon.HTTP_503
        resp.media = {"error": "Audit log unavailable", "detail": str(ex)}
        if ex.result is not None:
            resp.media["result"] = ex.result.to_dict()
    elif isinstance(ex, ValidationError):
        resp.status = falcon.HTTP_400
        resp.media = {"error": str(ex)}
    else:
        resp.status = falcon.HTTP_500
        resp.media = {"error": str(ex)}


def parse_datetime(value: str | None) -> datetime | None:
    """Parse ISO 8601; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid datetime: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_expiry(body: dict, now: datetime) -> datetime | None:
    """expires_at wins over a preset duration such as "7d"."""
    if body.get("expires_at"):
        return parse_datetime(body["expires_at"])
    duration = body.get("duration")
    if not duration:
        return None
    try:
        return AccessDuration(duration).expires_at(now)
    except ValueError as e:
        raise ValidationError(f"Unknown access duration: {duration}") from e


def format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
