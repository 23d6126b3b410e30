"""Entity: SetlistSong."""

from pydantic import Field

from src.setlist_studio.entities.core._base import Entity
from src.setlist_studio.entities.service.song.entity import Song


class SetlistSong(Entity):
    """A song placed at a position in a setlist, with per-performance overrides."""

    setlist_id: str = Field(description="Owning setlist")
    song_id: str = Field(description="Referenced song")
    position: int = Field(default=1, description="1-based order within the setlist")
    transition_notes: str | None = Field(default=None)
    performance_notes: str | None = Field(default=None)
    is_encore: bool = Field(default=False)
    is_optional: bool = Field(default=False)
    custom_bpm: int | None = Field(default=None, description="Tempo override for this performance")
    custom_key: str | None = Field(default=None, description="Key override for this performance")
    song: Song | None = Field(default=None, description="Loaded song, when available")

    @property
    def effective_bpm(self) -> int | None:
        if self.custom_bpm is not None:
            return self.custom_bpm
        return self.song.bpm if self.song else None

    @property
    def effective_key(self) -> str | None:
        if self.custom_key:
            return self.custom_key
        return self.song.musical_key if self.song else None

    @property
    def has_custom_settings(self) -> bool:
        return self.custom_bpm is not None or bool(self.custom_key) or bool(self.performance_notes)
