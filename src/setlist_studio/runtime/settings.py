from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HostingSettings(BaseSettings):
    """Process-level hosting values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: str = Field(default="Production", validation_alias="APP_ENVIRONMENT")
    container_signal: str = Field(default="", validation_alias="DOTNET_RUNNING_IN_CONTAINER")
    config_file: str = Field(default="config.yaml", validation_alias="APP_CONFIG_FILE")

    @property
    def running_in_container(self) -> bool:
        return self.container_signal == "true"
