"""ApplicationUser domain entity."""

from typing import Any

from pydantic import Field

from src.setlist_studio.entities.core._base import Entity


class ApplicationUser(Entity):
    """A musician who signed in through an external provider.

    Songs and setlists are owned by exactly one user.
    """

    display_name: str | None = Field(default=None, description="Name shown in the UI")
    email: str | None = Field(default=None, description="Email address reported by the provider")
    profile_picture_url: str | None = Field(default=None, description="Avatar URL")
    provider: str | None = Field(default=None, description="Provider used at registration")
    provider_key: str | None = Field(default=None, description="Provider-specific user key")

    @property
    def name(self) -> str:
        """Best available label for the user."""
        return self.display_name or self.email or self.id

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, ApplicationUser):
            return False

        return (
            self.id == other.id
            and self.display_name == other.display_name
            and self.email == other.email
            and self.provider == other.provider
            and self.provider_key == other.provider_key
        )

    def __hash__(self) -> int:
        return hash((self.id, self.display_name, self.email, self.provider, self.provider_key))
