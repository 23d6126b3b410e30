"""Startup database initialization under each hosting policy."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from src.setlist_studio.api.http.app import initialize_database
from src.setlist_studio.core.services import DbSessionService
from src.setlist_studio.entities import SongRepository
from src.setlist_studio.runtime.config.config_data import DatabaseConfig
from src.setlist_studio.runtime.startup_policy import DatabaseInitializationError, StartupPolicy

INITIALIZE = "src.setlist_studio.api.http.app.DatabaseInitializer.initialize"


@pytest.fixture
def database_service():
    service = DbSessionService(DatabaseConfig(url="sqlite://"), "Test")
    try:
        yield service
    finally:
        service.dispose()


def _failure() -> OperationalError:
    return OperationalError("CREATE TABLE songs", {}, Exception("unable to open database file"))


def test_success_without_seed(database_service):
    policy = StartupPolicy("Production", running_in_container=False)

    assert initialize_database(database_service, policy, seed_sample_data=False) is True
    with database_service.session_scope() as session:
        assert SongRepository(session).count() == 0


def test_success_with_seed(database_service):
    policy = StartupPolicy("Development", running_in_container=False)

    assert initialize_database(database_service, policy, seed_sample_data=True) is True
    with database_service.session_scope() as session:
        assert SongRepository(session).count() > 0


def test_development_failure_stops_startup(database_service, log_messages):
    policy = StartupPolicy("Development", running_in_container=False)
    failure = _failure()

    with patch(INITIALIZE, side_effect=failure):
        with pytest.raises(DatabaseInitializationError) as exc_info:
            initialize_database(database_service, policy, seed_sample_data=True)

    assert exc_info.value.__cause__ is failure
    assert any(r["message"] == "Failed to initialize database" for r in log_messages)


@pytest.mark.parametrize(
    "environment,in_container",
    [("Production", False), ("Staging", False), ("Development", True), ("development", False)],
)
def test_other_hosts_continue(database_service, log_messages, environment, in_container):
    policy = StartupPolicy(environment, running_in_container=in_container)

    with patch(INITIALIZE, side_effect=_failure()):
        assert initialize_database(database_service, policy, seed_sample_data=False) is False

    warnings = [r["message"] for r in log_messages if r["level"] == "WARNING"]
    assert any(m.startswith("Continuing without database initialization") for m in warnings)


def test_app_serves_health_after_failed_initialization():
    from fastapi.testclient import TestClient

    from src.setlist_studio.api.http.app import app

    with patch(INITIALIZE, side_effect=_failure()):
        with TestClient(app) as client:
            assert app.state.app_dependencies.database_ready is False
            response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "Healthy"
