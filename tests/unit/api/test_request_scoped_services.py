"""Business services are shared within a request and rebuilt for the next one."""

from types import SimpleNamespace

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from src.setlist_studio.api.http.deps import (
    get_db_session,
    get_setlist_service,
    get_song_service,
)
from src.setlist_studio.core.services import DbSessionService, SetlistService, SongService
from src.setlist_studio.runtime.config.config_data import DatabaseConfig


@pytest.fixture
def scoped_app():
    database_service = DbSessionService(DatabaseConfig(url="sqlite://"), "Test")
    database_service.create_all()

    app = FastAPI()
    app.state.app_dependencies = SimpleNamespace(database_service=database_service)
    seen: list[dict] = []

    @app.get("/services")
    async def services(
        first: SongService = Depends(get_song_service),
        second: SongService = Depends(get_song_service),
        setlists: SetlistService = Depends(get_setlist_service),
        db=Depends(get_db_session),
    ) -> dict:
        seen.append({"song": first, "song_again": second, "setlist": setlists, "db": db})
        return {"same": first is second}

    try:
        yield app, seen
    finally:
        database_service.dispose()


def test_same_instance_within_request(scoped_app):
    app, seen = scoped_app
    response = TestClient(app).get("/services")

    assert response.json() == {"same": True}
    assert seen[0]["song"]._session is seen[0]["db"]
    assert seen[0]["setlist"]._session is seen[0]["db"]


def test_fresh_instances_per_request(scoped_app):
    app, seen = scoped_app
    client = TestClient(app)

    client.get("/services")
    client.get("/services")

    assert seen[0]["song"] is not seen[1]["song"]
    assert seen[0]["db"] is not seen[1]["db"]
