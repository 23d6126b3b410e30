"""SetlistSong database table model."""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from src.setlist_studio.entities.core._base import EntityTable


class SetlistSongTable(EntityTable, table=True):
    """Join table between setlists and songs, carrying position and overrides."""

    __tablename__ = "setlist_songs"
    __table_args__ = (UniqueConstraint("setlist_id", "song_id", name="uq_setlist_song"),)

    setlist_id: str = Field(foreign_key="setlists.id", index=True)
    song_id: str = Field(foreign_key="songs.id", index=True)
    position: int = Field(default=1)
    transition_notes: str | None = Field(default=None, max_length=500)
    performance_notes: str | None = Field(default=None, max_length=1000)
    is_encore: bool = Field(default=False)
    is_optional: bool = Field(default=False)
    custom_bpm: int | None = Field(default=None)
    custom_key: str | None = Field(default=None, max_length=10)
