"""Entity: PerformanceDate."""

from datetime import datetime

from pydantic import Field

from src.setlist_studio.entities.core._base import Entity


class PerformanceDate(Entity):
    """A date on which a setlist is booked to be played."""

    setlist_id: str = Field(description="Setlist being performed")
    user_id: str = Field(description="Owner")
    date: datetime = Field(description="When the performance takes place")
    venue: str | None = Field(default=None)
    notes: str | None = Field(default=None)
