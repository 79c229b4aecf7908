"""
Pytest configuration and shared fixtures.
"""

import os
import pytest

from cronops.infra import metrics


@pytest.fixture(autouse=True, scope="function")
def reset_auth_env():
    """
    Run each test with API_AUTH_ENABLED=false unless it sets otherwise.

    Auth settings are read per request, so restoring the environment is
    enough to reset them.
    """
    # Store original values
    original_auth_enabled = os.environ.get("API_AUTH_ENABLED")
    original_api_key = os.environ.get("API_KEY")

    # Set defaults for tests (auth disabled)
    os.environ["API_AUTH_ENABLED"] = "false"

    yield

    # Restore original values
    if original_auth_enabled is not None:
        os.environ["API_AUTH_ENABLED"] = original_auth_enabled
    elif "API_AUTH_ENABLED" in os.environ:
        del os.environ["API_AUTH_ENABLED"]

    if original_api_key is not None:
        os.environ["API_KEY"] = original_api_key
    elif "API_KEY" in os.environ:
        del os.environ["API_KEY"]


@pytest.fixture(autouse=True)
def reset_metrics():
    """Zero all process-wide counters between tests."""
    metrics.REGISTRY.reset()
    yield
    metrics.REGISTRY.reset()


@pytest.fixture
def registry(tmp_path):
    """A fresh, unseeded expression registry in a temp directory."""
    from cronops.registry import ExpressionRegistry

    reg = ExpressionRegistry(db_path=str(tmp_path / "test.db"))
    yield reg
    reg.close()


@pytest.fixture
def client(registry):
    """TestClient whose registry dependency resolves to the temp registry."""
    from fastapi.testclient import TestClient
    from cronops.api.main import app
    from cronops.registry import get_registry

    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()
