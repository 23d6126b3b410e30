"""User identity database table model."""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from src.setlist_studio.entities.core._base import EntityTable


class UserIdentityTable(EntityTable, table=True):
    """Database persistence model for external logins."""

    __tablename__ = "user_identities"
    __table_args__ = (
        UniqueConstraint("provider", "provider_key", name="uq_identity_provider_key"),
        UniqueConstraint("user_id", "provider", name="uq_identity_user_provider"),
    )

    user_id: str = Field(foreign_key="users.id", index=True)
    provider: str = Field(max_length=50, index=True)
    provider_key: str = Field(max_length=200)
    provider_display_name: str | None = Field(default=None, max_length=100)
