"""Entity: Setlist."""

from datetime import datetime

from pydantic import Field

from src.setlist_studio.entities.core._base import Entity
from src.setlist_studio.entities.service.setlist_song.entity import SetlistSong


class Setlist(Entity):
    """An ordered collection of songs for a performance, or a reusable template."""

    name: str = Field(default="", description="Setlist name")
    description: str | None = Field(default=None)
    venue: str | None = Field(default=None)
    performance_date: datetime | None = Field(default=None)
    expected_duration_minutes: int | None = Field(default=None)
    is_template: bool = Field(default=False)
    is_active: bool = Field(default=True)
    performance_notes: str | None = Field(default=None)
    user_id: str = Field(default="", description="Owner")
    songs: list[SetlistSong] = Field(default_factory=list, description="Entries in position order")

    @property
    def song_count(self) -> int:
        return len(self.songs)

    @property
    def calculated_duration_minutes(self) -> int:
        """Whole minutes of all known song durations."""
        total_seconds = sum(
            entry.song.duration_seconds or 0 for entry in self.songs if entry.song is not None
        )
        return total_seconds // 60

    @property
    def is_ready_for_performance(self) -> bool:
        return self.song_count > 0 and self.performance_date is not None and bool(self.venue)
