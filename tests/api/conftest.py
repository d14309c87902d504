"""Fixtures for API tests."""

import falcon.asgi
import pytest
from falcon.testing import TestClient

from tenantauthz.config import Settings
from tenantauthz.main import add_routes

from tests.conftest import FakeUnitOfWork, make_uow_factory


@pytest.fixture
def settings() -> Settings:
    return Settings(default_page_limit=50, max_page_limit=100)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """One UoW shared by every request in a test."""
    return FakeUnitOfWork()


@pytest.fixture
def app(uow: FakeUnitOfWork, settings: Settings) -> falcon.asgi.App:
    """Falcon ASGI app with all API routes over in-memory repositories."""
    return add_routes(falcon.asgi.App(), make_uow_factory(uow), settings)


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)
