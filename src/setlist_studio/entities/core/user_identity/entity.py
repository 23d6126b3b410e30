"""User identity domain entity."""

from pydantic import Field

from src.setlist_studio.entities.core._base import Entity


class UserIdentity(Entity):
    """Maps an external provider login to an internal user.

    A user holds at most one identity per provider.
    """

    user_id: str = Field(description="Internal user ID this identity maps to")
    provider: str = Field(description="External provider scheme, e.g. 'google'")
    provider_key: str = Field(description="The provider's stable identifier for the user")
    provider_display_name: str | None = Field(default=None)
