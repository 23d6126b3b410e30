"""PerformanceDate database table model."""

from datetime import datetime

from sqlmodel import Field

from src.setlist_studio.entities.core._base import EntityTable


class PerformanceDateTable(EntityTable, table=True):
    """Database persistence model for performance dates."""

    __tablename__ = "performance_dates"

    setlist_id: str = Field(foreign_key="setlists.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    date: datetime = Field(index=True)
    venue: str | None = Field(default=None, max_length=200)
    notes: str | None = Field(default=None, max_length=1000)
