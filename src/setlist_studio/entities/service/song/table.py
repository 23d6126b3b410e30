"""Song database table model."""

from sqlmodel import Field

from src.setlist_studio.entities.core._base import EntityTable


class SongTable(EntityTable, table=True):
    """Database persistence model for songs."""

    __tablename__ = "songs"

    title: str = Field(max_length=200, index=True)
    artist: str = Field(max_length=200, index=True)
    album: str | None = Field(default=None, max_length=200)
    genre: str | None = Field(default=None, max_length=50, index=True)
    bpm: int | None = Field(default=None)
    musical_key: str | None = Field(default=None, max_length=10)
    duration_seconds: int | None = Field(default=None)
    notes: str | None = Field(default=None, max_length=2000)
    tags: str | None = Field(default=None, max_length=500)
    difficulty_rating: int | None = Field(default=None)
    user_id: str = Field(foreign_key="users.id", index=True)
