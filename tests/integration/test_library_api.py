"""Song and setlist API round trips through the full application."""

import pytest

SONG = {
    "title": "Sweet Child O' Mine",
    "artist": "Guns N' Roses",
    "genre": "Rock",
    "bpm": 125,
    "musical_key": "D",
    "duration_seconds": 356,
    "tags": "guitar solo, rock, 80s",
    "difficulty_rating": 4,
}


def _create_song(client, **overrides) -> dict:
    response = client.post("/api/songs", json={**SONG, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def _create_setlist(client, **overrides) -> dict:
    response = client.post("/api/setlists", json={"name": "Saturday Show", **overrides})
    assert response.status_code == 201, response.text
    return response.json()


class TestAnonymousAccess:
    @pytest.mark.parametrize(
        "method,path",
        [("get", "/api/songs"), ("post", "/api/songs"), ("get", "/api/setlists"), ("get", "/api/songs/genres")],
    )
    def test_unauthorized(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json() == {"detail": "Not authenticated"}


class TestSongApi:
    def test_crud(self, auth_client):
        created = _create_song(auth_client)
        song_id = created["id"]
        assert created["user_id"] == "test-user-id"

        assert auth_client.get(f"/api/songs/{song_id}").json()["title"] == SONG["title"]

        updated = auth_client.put(f"/api/songs/{song_id}", json={**SONG, "bpm": 120})
        assert updated.status_code == 200
        assert updated.json()["bpm"] == 120

        deleted = auth_client.delete(f"/api/songs/{song_id}")
        assert deleted.json() == {"message": "Song deleted successfully"}
        assert auth_client.get(f"/api/songs/{song_id}").status_code == 404

    def test_validation_error(self, auth_client):
        response = auth_client.post("/api/songs", json={"title": "", "artist": "Nobody", "bpm": 500})

        assert response.status_code == 400
        assert "Song title is required" in response.json()["detail"]

    def test_unknown_song(self, auth_client):
        assert auth_client.put("/api/songs/missing", json=SONG).status_code == 404
        assert auth_client.delete("/api/songs/missing").status_code == 404

    def test_list_and_filters(self, auth_client):
        _create_song(auth_client)
        _create_song(auth_client, title="Take Five", artist="Dave Brubeck", genre="Jazz", tags="jazz")

        page = auth_client.get("/api/songs", params={"genre": "Jazz"}).json()
        assert page["total_count"] == 1
        assert page["items"][0]["title"] == "Take Five"
        assert page["total_pages"] == 1

        assert auth_client.get("/api/songs/genres").json() == ["Jazz", "Rock"]
        assert auth_client.get("/api/songs/artists").json() == ["Dave Brubeck", "Guns N' Roses"]

    def test_page_size_is_bounded(self, auth_client):
        assert auth_client.get("/api/songs", params={"page_size": 500}).status_code == 422


class TestSetlistApi:
    def test_build_and_export(self, auth_client):
        first = _create_song(auth_client)
        second = _create_song(auth_client, title="Take Five", artist="Dave Brubeck")
        setlist = _create_setlist(auth_client, venue="Roxy")
        setlist_id = setlist["id"]

        for song in (first, second):
            response = auth_client.post(f"/api/setlists/{setlist_id}/songs", json={"song_id": song["id"]})
            assert response.status_code == 201

        reordered = auth_client.put(
            f"/api/setlists/{setlist_id}/songs/order", json={"song_ids": [second["id"], first["id"]]}
        )
        assert reordered.status_code == 200

        loaded = auth_client.get(f"/api/setlists/{setlist_id}").json()
        assert [entry["song"]["title"] for entry in loaded["songs"]] == ["Take Five", SONG["title"]]

        entry_id = loaded["songs"][0]["id"]
        patched = auth_client.patch(f"/api/setlists/songs/{entry_id}", json={"custom_key": "Eb"})
        assert patched.json()["custom_key"] == "Eb"

        export = auth_client.get(f"/api/setlists/{setlist_id}/export/csv")
        assert export.status_code == 200
        assert export.headers["content-type"].startswith("text/csv")
        assert 'filename="setlist_Saturday Show_' in export.headers["content-disposition"]
        assert "1,Take Five,Dave Brubeck,Eb," in export.text

    def test_duplicate_song_rejected(self, auth_client):
        song = _create_song(auth_client)
        setlist = _create_setlist(auth_client)
        path = f"/api/setlists/{setlist['id']}/songs"

        assert auth_client.post(path, json={"song_id": song["id"]}).status_code == 201
        assert auth_client.post(path, json={"song_id": song["id"]}).status_code == 404

    def test_remove_song(self, auth_client):
        song = _create_song(auth_client)
        setlist = _create_setlist(auth_client)
        auth_client.post(f"/api/setlists/{setlist['id']}/songs", json={"song_id": song["id"]})

        response = auth_client.delete(f"/api/setlists/{setlist['id']}/songs/{song['id']}")

        assert response.status_code == 200
        assert auth_client.get(f"/api/setlists/{setlist['id']}").json()["songs"] == []

    def test_invalid_reorder(self, auth_client):
        setlist = _create_setlist(auth_client)
        response = auth_client.put(
            f"/api/setlists/{setlist['id']}/songs/order", json={"song_ids": ["missing"]}
        )
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid song ordering"}

    def test_copy_and_template(self, auth_client):
        template = _create_setlist(auth_client, name="Jazz Template", is_template=True, is_active=False)

        copy = auth_client.post(f"/api/setlists/{template['id']}/copy", json={"name": "Jazz Copy"})
        created = auth_client.post(
            f"/api/setlists/{template['id']}/from-template", json={"name": "Jazz Night", "venue": "Blue Room"}
        )

        assert copy.status_code == 201
        assert copy.json()["is_template"] is False
        assert created.status_code == 201
        assert created.json()["is_active"] is True
        assert created.json()["venue"] == "Blue Room"

    def test_from_non_template(self, auth_client):
        setlist = _create_setlist(auth_client)
        response = auth_client.post(
            f"/api/setlists/{setlist['id']}/from-template", json={"name": "Nope"}
        )
        assert response.status_code == 404
        assert response.json() == {"detail": "Template not found"}

    def test_update_and_delete(self, auth_client):
        setlist = _create_setlist(auth_client)

        updated = auth_client.put(
            f"/api/setlists/{setlist['id']}", json={"name": "Renamed", "expected_duration_minutes": 45}
        )
        assert updated.json()["name"] == "Renamed"

        assert auth_client.delete(f"/api/setlists/{setlist['id']}").status_code == 200
        assert auth_client.get(f"/api/setlists/{setlist['id']}").status_code == 404

    def test_invalid_setlist(self, auth_client):
        response = auth_client.post("/api/setlists", json={"name": " "})
        assert response.status_code == 400
        assert "Setlist name is required" in response.json()["detail"]

    def test_export_unknown(self, auth_client):
        assert auth_client.get("/api/setlists/missing/export/csv").status_code == 404

    def test_setlist_song_limits(self, auth_client):
        song = _create_song(auth_client)
        setlist = _create_setlist(auth_client)
        path = f"/api/setlists/{setlist['id']}/songs"

        too_far = auth_client.post(path, json={"song_id": song["id"], "position": 5000})
        assert too_far.status_code == 400
        assert "Position must be between 1 and 1000" in too_far.json()["detail"]

        entry = auth_client.post(path, json={"song_id": song["id"]}).json()
        patched = auth_client.patch(
            f"/api/setlists/songs/{entry['id']}", json={"custom_bpm": 9999, "custom_key": "X" * 50}
        )

        assert patched.status_code == 400
        assert "Custom BPM must be between 40 and 250" in patched.json()["detail"]
        assert "Custom key cannot exceed 10 characters" in patched.json()["detail"]
        stored = auth_client.get(f"/api/setlists/{setlist['id']}").json()["songs"][0]
        assert stored["custom_bpm"] is None
        assert stored["custom_key"] is None


class TestPerformanceDateApi:
    def test_book_list_and_delete(self, auth_client):
        setlist = _create_setlist(auth_client)
        path = f"/api/setlists/{setlist['id']}/performance-dates"

        later = auth_client.post(path, json={"date": "2099-08-01T20:00:00Z", "venue": "Arena"})
        sooner = auth_client.post(path, json={"date": "2099-07-01T20:00:00Z", "venue": "Club"})
        assert later.status_code == 201
        assert sooner.json()["setlist_id"] == setlist["id"]

        listed = auth_client.get(path).json()
        assert [d["venue"] for d in listed] == ["Club", "Arena"]

        upcoming = auth_client.get("/api/setlists/performance-dates/upcoming").json()
        assert upcoming["total_count"] == 2
        assert upcoming["items"][0]["venue"] == "Club"

        deleted = auth_client.delete(f"/api/setlists/performance-dates/{sooner.json()['id']}")
        assert deleted.json() == {"message": "Performance date deleted successfully"}
        assert [d["venue"] for d in auth_client.get(path).json()] == ["Arena"]

    def test_unknown_setlist_and_date(self, auth_client):
        path = "/api/setlists/missing/performance-dates"

        assert auth_client.get(path).status_code == 404
        assert auth_client.post(path, json={"date": "2099-07-01T20:00:00Z"}).status_code == 404
        assert auth_client.delete("/api/setlists/performance-dates/missing").status_code == 404

    def test_validation_error(self, auth_client):
        setlist = _create_setlist(auth_client)
        response = auth_client.post(
            f"/api/setlists/{setlist['id']}/performance-dates",
            json={"date": "2099-07-01T20:00:00Z", "venue": "v" * 201},
        )

        assert response.status_code == 400
        assert "Venue cannot exceed 200 characters" in response.json()["detail"]


class TestDurationApi:
    def test_duration(self, auth_client):
        first = _create_song(auth_client, bpm=100, musical_key="C", duration_seconds=200)
        second = _create_song(auth_client, title="Take Five", bpm=120, musical_key="F#", duration_seconds=300)
        setlist = _create_setlist(auth_client)
        for song in (first, second):
            auth_client.post(f"/api/setlists/{setlist['id']}/songs", json={"song_id": song["id"]})

        response = auth_client.get(f"/api/setlists/{setlist['id']}/duration")

        body = response.json()
        assert response.status_code == 200
        assert body["total_song_seconds"] == 500
        assert body["total_transition_seconds"] == pytest.approx(29)
        assert [item["song_title"] for item in body["items"]] == [SONG["title"], "Take Five"]

    def test_unknown_setlist(self, auth_client):
        assert auth_client.get("/api/setlists/missing/duration").status_code == 404
