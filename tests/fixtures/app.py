"""Application-level fixtures: TestClient with and without a signed-in user."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.setlist_studio.api.http.app import app
from src.setlist_studio.api.http.deps import get_authentication_strategy
from src.setlist_studio.core.services import StaticAuthenticationStrategy
from src.setlist_studio.entities import ApplicationUser, ApplicationUserRepository

TEST_PRINCIPAL_NAME = "Test User"
TEST_PRINCIPAL_ID = "test-user-id"
TEST_PRINCIPAL_EMAIL = "test@example.com"


@pytest.fixture(name="client")
def client_fixture() -> Generator[TestClient]:
    """Anonymous client; startup runs against a fresh in-memory database."""
    with TestClient(app) as client:
        yield client


@pytest.fixture(name="auth_client")
def auth_client_fixture() -> Generator[TestClient]:
    """Client whose requests are authenticated as the test principal."""
    strategy = StaticAuthenticationStrategy(
        TEST_PRINCIPAL_NAME, TEST_PRINCIPAL_ID, TEST_PRINCIPAL_EMAIL
    )
    app.dependency_overrides[get_authentication_strategy] = lambda: strategy
    try:
        with TestClient(app) as client:
            with app.state.app_dependencies.database_service.session_scope() as db:
                ApplicationUserRepository(db).create(
                    ApplicationUser(
                        id=TEST_PRINCIPAL_ID,
                        display_name=TEST_PRINCIPAL_NAME,
                        email=TEST_PRINCIPAL_EMAIL,
                    )
                )
            yield client
    finally:
        app.dependency_overrides.pop(get_authentication_strategy, None)
