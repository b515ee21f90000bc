# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.main import app, get_admin_client


class StubAdminClient:
    """Upstream stand-in: returns one canned response (or raises) and records calls."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def graphql(self, query, variables=None):
        self.calls.append((query, variables))
        if self.error is not None:
            raise self.error
        return self.response

    async def aclose(self):
        pass


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_upstream():
    def _use(upstream):
        app.dependency_overrides[get_admin_client] = lambda: upstream
        return upstream

    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def stub_upstream(use_upstream):
    def _stub(response=None, error=None):
        return use_upstream(StubAdminClient(response=response, error=error))

    return _stub


@pytest.fixture
def hide_error_details():
    app.dependency_overrides[get_settings] = lambda: Settings(expose_error_details=False)
    yield
    app.dependency_overrides.pop(get_settings, None)
