"""Entity: Song."""

from typing import Any

from pydantic import Field

from src.setlist_studio.entities.core._base import Entity


class Song(Entity):
    """A song in a musician's library.

    Field limits are enforced by the song service so that invalid input can
    be reported as a list of messages instead of a parse error.
    """

    title: str = Field(default="", description="Song title")
    artist: str = Field(default="", description="Performing artist or band")
    album: str | None = Field(default=None)
    genre: str | None = Field(default=None)
    bpm: int | None = Field(default=None, description="Tempo in beats per minute")
    musical_key: str | None = Field(default=None, description="Key, e.g. 'F#m'")
    duration_seconds: int | None = Field(default=None)
    notes: str | None = Field(default=None)
    tags: str | None = Field(default=None, description="Comma separated tags")
    difficulty_rating: int | None = Field(default=None, description="1 (easy) to 5 (hard)")
    user_id: str = Field(default="", description="Owner")

    @property
    def formatted_duration(self) -> str:
        """Duration as ``mm:ss``, empty when unknown."""
        if self.duration_seconds is None:
            return ""
        minutes, seconds = divmod(self.duration_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def is_complete(self) -> bool:
        """Has everything needed on stage: title, artist, tempo and key."""
        return bool(self.title and self.artist and self.bpm is not None and self.musical_key)

    @property
    def tag_list(self) -> list[str]:
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]

    def __eq__(self, other: Any) -> bool:
        """Compare songs by business attributes, ignoring timestamps."""
        if not isinstance(other, Song):
            return False
        return self.model_dump(exclude={"created_at", "updated_at"}) == other.model_dump(
            exclude={"created_at", "updated_at"}
        )

    def __hash__(self) -> int:
        return hash((self.id, self.title, self.artist, self.user_id))
