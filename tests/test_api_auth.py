"""
Tests for API authentication.

Tests X-API-Key header authentication when API_AUTH_ENABLED=true.
"""

import importlib
import os

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from post_classifier.dedup.reactor import DedupOutcome

# Test API key for testing
TEST_API_KEY = "test-secret-key-12345"


def reload_app(env):
    """Reload auth and main under the given environment; return a TestClient."""
    with patch.dict(os.environ, env, clear=False):
        import post_classifier.api.dependencies.auth as auth_module

        importlib.reload(auth_module)

        import post_classifier.api.main as main_module

        importlib.reload(main_module)

    from fastapi.testclient import TestClient
    from post_classifier.api.dependencies.services import get_reactor

    reactor = MagicMock()
    reactor.trigger = AsyncMock(return_value=DedupOutcome())
    main_module.app.dependency_overrides[get_reactor] = lambda: reactor
    return TestClient(main_module.app)


class TestAuthDisabled:
    """Tests when authentication is disabled (default)."""

    def test_health_no_auth_required(self):
        client = reload_app({"API_AUTH_ENABLED": "false"})
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_protected_endpoint_open(self):
        """Protected endpoints accept requests without a key when auth is off."""
        client = reload_app({"API_AUTH_ENABLED": "false"})
        assert client.post("/dedup/run").status_code == 200


class TestAuthEnabled:
    """Tests when authentication is enabled."""

    @pytest.fixture
    def client(self):
        return reload_app({"API_AUTH_ENABLED": "true", "API_KEY": TEST_API_KEY})

    def test_health_no_auth_required_even_when_enabled(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_protected_endpoint_requires_auth(self, client):
        response = client.post("/dedup/run")

        assert response.status_code == 401
        assert "Missing API key" in response.json()["detail"]
        assert response.headers["www-authenticate"] == "ApiKey"

    def test_invalid_api_key_rejected(self, client):
        response = client.post("/dedup/run", headers={"X-API-Key": "wrong-key"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key"

    def test_valid_api_key_accepted(self, client):
        response = client.post("/dedup/run", headers={"X-API-Key": TEST_API_KEY})

        assert response.status_code == 200
        assert response.json()["removed"] is False

    def test_every_router_protected(self, client):
        assert client.post("/analysis/posts", json={"posts": ["x"]}).status_code == 401
        assert client.post("/post-groups/refresh").status_code == 401


class TestAuthEnvParsing:
    """Tests for API_AUTH_ENABLED parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("true", True),
        ("TRUE", True),
        ("1", True),
        ("yes", True),
        ("on", True),
        ("false", False),
        ("0", False),
        ("", False),
    ])
    def test_enabled_values(self, value, expected):
        with patch.dict(os.environ, {"API_AUTH_ENABLED": value}, clear=False):
            import post_classifier.api.dependencies.auth as auth_module

            importlib.reload(auth_module)
            assert auth_module.API_AUTH_ENABLED is expected


class TestAuthEnabledWithoutKey:
    """Auth enabled but API_KEY left empty."""

    def test_any_key_rejected(self):
        client = reload_app({"API_AUTH_ENABLED": "true", "API_KEY": ""})
        response = client.post("/dedup/run", headers={"X-API-Key": "anything"})
        assert response.status_code == 401
