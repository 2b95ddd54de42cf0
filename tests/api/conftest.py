"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from collabrbac.config import Settings
from collabrbac.interfaces.api.app import create_app
from collabrbac.main import build_resources


class _TestUser:
    def __init__(self, user_id: str) -> None:
        self.user_id = user_id


class AuthBypassMiddleware:
    """Middleware that sets context.user from the X-Test-User header.

    Defaults to creator-1; "anonymous" leaves the request unauthenticated.
    """

    async def process_request(self, req, resp):
        user_id = req.get_header("X-Test-User", default="creator-1")
        req.context.user = None if user_id == "anonymous" else _TestUser(user_id)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        default_invite_role="viewer",
        expiring_soon_days=7,
        audit_export_format="csv",
        template_admins="creator-1",
    )


@pytest.fixture
def resources(uow_factory, clock, settings):
    """API resources over the in-memory store."""
    return build_resources(uow_factory, clock, settings)


@pytest.fixture
def app(resources):
    """Falcon ASGI app with the test auth middleware."""
    return create_app(resources, middleware=[AuthBypassMiddleware()])


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)