"""Health endpoint tests."""

import pytest
from falcon.asgi import App
from falcon.testing import TestClient

from collabrbac.interfaces.api.resources.health import HealthResource


class _Pool:
    def __init__(self, closed: bool) -> None:
        self.closed = closed


def _client(pool=None) -> TestClient:
    app = App()
    health = HealthResource(pool)
    app.add_route("/v1/health", health)
    app.add_route("/v1/health/ready", health, suffix="ready")
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    """Create test client with health endpoints."""
    return _client()


def test_health_liveness(client: TestClient) -> None:
    """GET /v1/health returns 200."""
    result = client.simulate_get("/v1/health")
    assert result.status_code == 200
    assert result.json["status"] == "ok"


def test_health_ready(client: TestClient) -> None:
    """GET /v1/health/ready returns 200."""
    result = client.simulate_get("/v1/health/ready")
    assert result.status_code == 200
    assert result.json["status"] == "ready"


def test_health_ready_with_open_pool() -> None:
    result = _client(_Pool(closed=False)).simulate_get("/v1/health/ready")
    assert result.status_code == 200


def test_health_not_ready_when_pool_closed() -> None:
    """GET /v1/health/ready returns 503 once the pool is closed."""
    result = _client(_Pool(closed=True)).simulate_get("/v1/health/ready")
    assert result.status_code == 503
    assert result.json["status"] == "unavailable"
