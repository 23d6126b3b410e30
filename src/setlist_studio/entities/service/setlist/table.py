"""Setlist database table model."""

from datetime import datetime

from sqlmodel import Field

from src.setlist_studio.entities.core._base import EntityTable


class SetlistTable(EntityTable, table=True):
    """Database persistence model for setlists."""

    __tablename__ = "setlists"

    name: str = Field(max_length=200, index=True)
    description: str | None = Field(default=None, max_length=1000)
    venue: str | None = Field(default=None, max_length=200)
    performance_date: datetime | None = Field(default=None)
    expected_duration_minutes: int | None = Field(default=None)
    is_template: bool = Field(default=False, index=True)
    is_active: bool = Field(default=True)
    performance_notes: str | None = Field(default=None, max_length=2000)
    user_id: str = Field(foreign_key="users.id", index=True)
