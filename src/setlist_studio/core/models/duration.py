"""Estimated running time of a setlist."""

from pydantic import BaseModel, Field


class SetlistItemDuration(BaseModel):
    setlist_song_id: str
    song_id: str
    song_title: str
    position: int
    resolved_duration_seconds: float = Field(description="Song length, or the configured default")
    predicted_transition_seconds_to_next: float = Field(
        default=0, description="Changeover to the following song; 0 for the last one"
    )


class SetlistDuration(BaseModel):
    total_song_seconds: float = 0
    total_transition_seconds: float = 0
    combined_total_seconds: float = 0
    items: list[SetlistItemDuration] = Field(default_factory=list)
