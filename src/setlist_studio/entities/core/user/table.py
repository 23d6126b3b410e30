"""ApplicationUser database table model."""

from sqlmodel import Field

from src.setlist_studio.entities.core._base import EntityTable


class ApplicationUserTable(EntityTable, table=True):
    """Database persistence model for users."""

    __tablename__ = "users"

    display_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=256, index=True)
    profile_picture_url: str | None = Field(default=None, max_length=500)
    provider: str | None = Field(default=None, max_length=50)
    provider_key: str | None = Field(default=None, max_length=200)
