"""Unit tests for library entities."""

from datetime import UTC, datetime

import pytest

from src.setlist_studio.entities import Setlist, SetlistSong, Song


class TestSong:
    @pytest.mark.parametrize(
        "seconds,expected",
        [(None, ""), (0, "00:00"), (5, "00:05"), (294, "04:54"), (3600, "60:00")],
    )
    def test_formatted_duration(self, seconds, expected):
        assert Song(duration_seconds=seconds).formatted_duration == expected

    def test_is_complete(self):
        assert Song(title="Take Five", artist="Dave Brubeck", bpm=176, musical_key="Bb").is_complete
        assert not Song(title="Take Five", artist="Dave Brubeck", bpm=176).is_complete
        assert not Song(title="Take Five", artist="Dave Brubeck", musical_key="Bb").is_complete

    def test_tag_list(self):
        assert Song(tags="jazz,  standard ,, ballad").tag_list == ["jazz", "standard", "ballad"]
        assert Song().tag_list == []

    def test_equality_ignores_timestamps(self):
        first = Song(id="s1", title="Summertime", artist="George Gershwin")
        second = first.model_copy(update={"created_at": datetime(2020, 1, 1, tzinfo=UTC)})
        assert first == second
        assert hash(first) == hash(second)


class TestSetlistSong:
    def test_effective_values_prefer_overrides(self):
        song = Song(bpm=120, musical_key="C")
        entry = SetlistSong(setlist_id="l1", song_id="s1", song=song, custom_bpm=90, custom_key="D")
        assert entry.effective_bpm == 90
        assert entry.effective_key == "D"
        assert entry.has_custom_settings

    def test_effective_values_fall_back_to_song(self):
        song = Song(bpm=120, musical_key="C")
        entry = SetlistSong(setlist_id="l1", song_id="s1", song=song, custom_key="")
        assert entry.effective_bpm == 120
        assert entry.effective_key == "C"
        assert not entry.has_custom_settings

    def test_no_song_loaded(self):
        entry = SetlistSong(setlist_id="l1", song_id="s1")
        assert entry.effective_bpm is None
        assert entry.effective_key is None


class TestSetlist:
    def _entries(self) -> list[SetlistSong]:
        return [
            SetlistSong(setlist_id="l1", song_id="a", position=1, song=Song(duration_seconds=200)),
            SetlistSong(setlist_id="l1", song_id="b", position=2, song=Song(duration_seconds=190)),
            SetlistSong(setlist_id="l1", song_id="c", position=3, song=Song()),
        ]

    def test_counts_and_duration(self):
        setlist = Setlist(name="Gig", songs=self._entries())
        assert setlist.song_count == 3
        assert setlist.calculated_duration_minutes == 6

    def test_ready_for_performance(self):
        date = datetime(2030, 6, 1, 20, 0, tzinfo=UTC)
        assert Setlist(name="Gig", venue="Club", performance_date=date, songs=self._entries()).is_ready_for_performance
        assert not Setlist(name="Gig", venue="Club", performance_date=date).is_ready_for_performance
        assert not Setlist(name="Gig", performance_date=date, songs=self._entries()).is_ready_for_performance
        assert not Setlist(name="Gig", venue="Club", songs=self._entries()).is_ready_for_performance

    def test_defaults(self):
        setlist = Setlist(name="Gig")
        assert setlist.is_active is True
        assert setlist.is_template is False
        assert setlist.songs == []
