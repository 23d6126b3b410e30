"""Tests for CSV export of setlists."""

from datetime import UTC, datetime

import pytest

from src.setlist_studio.core.services.library.setlist_export_service import (
    CSV_COLUMNS,
    SetlistExportService,
    escape_csv_value,
    sanitize_filename,
)
from src.setlist_studio.entities import Setlist


class TestEscaping:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, ""),
            ("", ""),
            ("Plain", "Plain"),
            ("Hello, World", '"Hello, World"'),
            ('Say "hi"', '"Say ""hi"""'),
            ("Line\nbreak", '"Line\nbreak"'),
        ],
    )
    def test_escape_csv_value(self, value, expected):
        assert escape_csv_value(value) == expected

    def test_sanitize_filename(self):
        assert sanitize_filename('Rock/Pop: "Live"?') == "Rock_Pop_ _Live__"
        assert len(sanitize_filename("x" * 80)) == 50


class TestCsvContent:
    def test_header_and_rows(self, setlist_service, export_service, user_id, make_song, make_setlist):
        song = make_song(user_id, notes="ignored")
        setlist = make_setlist(
            user_id,
            name="Gig, Night",
            performance_date=datetime(2030, 6, 1, 21, 30, tzinfo=UTC),
            expected_duration_minutes=60,
        )
        entry = setlist_service.add_song(setlist.id, song.id, user_id)
        setlist_service.update_setlist_song(
            entry.id, user_id, custom_key="Gm", performance_notes='Count "1, 2"', is_encore=True
        )
        loaded = setlist_service.get_setlist(setlist.id, user_id)

        content = SetlistExportService.generate_csv_content(
            loaded, exported_at=datetime(2030, 1, 2, 3, 4, 5, tzinfo=UTC)
        )
        lines = content.splitlines()

        assert lines[0] == "# Setlist Export"
        assert lines[1] == '# Name: "Gig, Night"'
        assert "# Venue: The Blue Note" in lines
        assert "# Performance Date: 2030-06-01 21:30" in lines
        assert "# Expected Duration: 60 minutes" in lines
        assert "# Total Songs: 1" in lines
        assert "# Exported: 2030-01-02 03:04:05 UTC" in lines
        assert lines[lines.index(CSV_COLUMNS) + 1] == (
            '1,Billie Jean,Michael Jackson,Gm,117,294,Pop,3,"Count ""1, 2""",,Yes,No'
        )

    def test_export_encodes_utf8(self, setlist_service, export_service, user_id, make_song, make_setlist):
        song = make_song(user_id, title="Café del Mar")
        setlist = make_setlist(user_id)
        setlist_service.add_song(setlist.id, song.id, user_id)

        data = export_service.export_setlist_to_csv(setlist.id, user_id)

        assert isinstance(data, bytes)
        assert "Café del Mar" in data.decode("utf-8")

    def test_export_carries_filename(
        self, setlist_service, export_service, user_id, make_song, make_setlist
    ):
        setlist = make_setlist(
            user_id, name="Summer Tour", performance_date=datetime(2030, 7, 4, tzinfo=UTC)
        )
        setlist_service.add_song(setlist.id, make_song(user_id).id, user_id)

        export = export_service.export_setlist(setlist.id, user_id)

        assert export.filename == "setlist_Summer Tour_2030-07-04.csv"
        assert "Billie Jean" in export.content.decode("utf-8")

    def test_export_loads_setlist_once(self, export_service, user_id, make_setlist, monkeypatch):
        setlist = make_setlist(user_id)
        repository = export_service._setlists
        calls = []
        original_get = repository.get

        def counting_get(*args, **kwargs):
            calls.append(args)
            return original_get(*args, **kwargs)

        monkeypatch.setattr(repository, "get", counting_get)

        assert export_service.export_setlist(setlist.id, user_id) is not None
        assert len(calls) == 1

    def test_export_not_owned(self, export_service, user_id, other_user_id, make_setlist):
        setlist = make_setlist(user_id)
        assert export_service.export_setlist_to_csv(setlist.id, other_user_id) is None

    def test_export_requires_user(self, export_service):
        with pytest.raises(ValueError, match="User ID is required"):
            export_service.export_setlist_to_csv("some-id", " ")


class TestFilename:
    def test_uses_performance_date(self):
        setlist = Setlist(
            name="Summer Tour", performance_date=datetime(2030, 7, 4, tzinfo=UTC), user_id="u"
        )
        assert SetlistExportService.generate_csv_filename(setlist) == "setlist_Summer Tour_2030-07-04.csv"

    def test_falls_back_to_today(self):
        setlist = Setlist(name="Rehearsal", user_id="u")
        filename = SetlistExportService.generate_csv_filename(
            setlist, today=datetime(2031, 1, 15, tzinfo=UTC)
        )
        assert filename == "setlist_Rehearsal_2031-01-15.csv"
