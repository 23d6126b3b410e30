"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, Field, computed_field, model_validator

# Environments that get the hardened cookie names and HSTS.
HARDENED_ENVIRONMENTS = ("Production", "Staging")


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(default=["http://localhost:5000"])
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class RedisConfig(BaseModel):
    """Redis configuration model."""

    enabled: bool = Field(default=False, description="Enable Redis session storage")
    url: str = Field(default="", description="Redis connection URL")
    password: str | None = Field(
        default=None, description="Password for Redis authentication"
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the Redis connection string with password if provided."""
        if self.password and "@" not in self.url:
            scheme, sep, rest = self.url.partition("://")
            if sep:
                return f"{scheme}://:{self.password}@{rest}"
        return self.url


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Default logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log file format")
    file: str = Field(default="", description="Log file path (empty disables file logging)")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of rotated log files to keep"
    )
    levels: dict[str, str] = Field(
        default_factory=lambda: {
            "sqlalchemy.engine": "WARNING",
            "sqlalchemy.pool": "WARNING",
            "httpx": "WARNING",
        },
        description="Per-namespace logging level overrides",
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./data/setliststudio.db",
        description="Default database connection URL",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing the database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_in_memory(self) -> bool:
        """True for ``sqlite://`` and ``sqlite:///:memory:`` URLs."""
        return self.is_sqlite and (self.url in ("sqlite://", "sqlite:///") or ":memory:" in self.url)

    @computed_field
    @property
    def connection_string(self) -> str:
        """Resolve the connection string, injecting a password from the environment if configured."""
        if self.is_sqlite or not self.password_env_var:
            return self.url

        from sqlalchemy.engine import make_url

        password = os.getenv(self.password_env_var)
        if not password:
            raise ValueError(f"Environment variable {self.password_env_var} not set")
        url = make_url(self.url).set(password=password)
        return url.render_as_string(hide_password=False)


class AppConfig(BaseModel):
    """Application and hosting configuration model."""

    name: str = Field(default="Setlist Studio", description="Service name")
    version: str = Field(default="1.0.0", description="Service version")
    environment: str = Field(
        default="Production",
        description="Hosting environment name (Development, Staging, Production, Test, ...)",
    )
    container_signal: str = Field(
        default="",
        description="Raw value of DOTNET_RUNNING_IN_CONTAINER",
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=5000, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def is_development(self) -> bool:
        return self.environment == "Development"

    @property
    def is_hardened(self) -> bool:
        """Production and Staging share the strict cookie and HSTS settings."""
        return self.environment in HARDENED_ENVIRONMENTS

    @property
    def running_in_container(self) -> bool:
        return self.container_signal == "true"


class ExternalProviderConfig(BaseModel):
    """OAuth provider (Google, Microsoft, Facebook) configuration model."""

    display_name: str = Field(description="Name shown on the login page")
    client_id: str = Field(default="", description="OAuth client / app id")
    client_secret: str = Field(default="", description="OAuth client / app secret")
    authorization_endpoint: str = Field(description="Authorization endpoint URL")
    token_endpoint: str = Field(description="Token endpoint URL")
    userinfo_endpoint: str = Field(description="Endpoint returning the signed-in profile")
    scopes: list[str] = Field(default_factory=list, description="Scopes to request")
    callback_path: str = Field(description="Callback path registered with the provider")
    use_pkce: bool = Field(default=True, description="Send a PKCE challenge")
    id_field: str = Field(default="sub", description="Userinfo field holding the provider key")
    name_field: str = Field(default="name", description="Userinfo field holding the display name")
    email_field: str = Field(default="email", description="Userinfo field holding the email")
    picture_field: str | None = Field(
        default=None, description="Userinfo field holding a picture URL"
    )

    @property
    def is_configured(self) -> bool:
        """Credentials are present and not placeholder values."""
        return is_valid_authentication_credentials(self.client_id, self.client_secret)


def is_valid_authentication_credentials(client_id: str | None, client_secret: str | None) -> bool:
    """Return True when both values are non-blank and neither is a ``YOUR_`` placeholder."""
    if not client_id or not client_id.strip():
        return False
    if not client_secret or not client_secret.strip():
        return False
    return not (client_id.startswith("YOUR_") or client_secret.startswith("YOUR_"))


class IdentityCookieConfig(BaseModel):
    """Identity cookie settings."""

    name: str = Field(default="SetlistStudio-Identity", description="Cookie name")
    expire_minutes: int = Field(default=120, description="Session lifetime in minutes")
    sliding_expiration: bool = Field(default=True, description="Renew lifetime on activity")
    same_site: Literal["lax", "strict", "none"] = Field(default="strict")
    login_path: str = Field(default="/login")
    logout_path: str = Field(default="/Identity/Account/Logout")

    def resolve_name(self, environment: str) -> str:
        """Use the ``__Host-`` prefix in Production and Staging."""
        if environment in HARDENED_ENVIRONMENTS and not self.name.startswith("__Host-"):
            return f"__Host-{self.name}"
        return self.name


class AuthenticationConfig(BaseModel):
    """External login providers and the identity cookie."""

    providers: dict[str, ExternalProviderConfig] = Field(
        default_factory=dict, description="External OAuth providers keyed by scheme"
    )
    cookie: IdentityCookieConfig = Field(default_factory=IdentityCookieConfig)
    allowed_redirect_hosts: list[str] = Field(
        default_factory=list,
        description="Allowed hosts for absolute return URLs (empty = relative only)",
    )

    def enabled_providers(self) -> dict[str, ExternalProviderConfig]:
        return {name: p for name, p in self.providers.items() if p.is_configured}


class LocalizationConfig(BaseModel):
    """Supported UI cultures."""

    supported_cultures: list[str] = Field(
        default_factory=lambda: ["en-US", "es-ES", "fr-FR", "de-DE"]
    )
    default_culture: str = Field(default="en-US")
    cookie_name: str = Field(default="SetlistStudio-Culture")

    @model_validator(mode="after")
    def _check_cultures(self) -> LocalizationConfig:
        if not self.supported_cultures:
            raise ValueError("localization.supported_cultures must not be empty")
        if self.default_culture not in self.supported_cultures:
            raise ValueError(
                f"default culture '{self.default_culture}' is not a supported culture"
            )
        return self


class SecurityConfig(BaseModel):
    """Security configuration for headers and auth flows."""

    auth_session_ttl_seconds: int = Field(
        default=600, description="OAuth round-trip session TTL (10 minutes)"
    )
    content_security_policy: str = Field(
        default=(
            "default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data: https:; font-src 'self'; connect-src 'self' ws: wss:; "
            "frame-ancestors 'none'; base-uri 'self'; form-action 'self'"
        )
    )
    permissions_policy: str = Field(
        default="camera=(), microphone=(), geolocation=(), payment=(), usb=()"
    )


class SetlistTimingConfig(BaseModel):
    """Timing model used to estimate how long a setlist plays."""

    base_transition_seconds: float = Field(default=15, ge=0)
    bpm_difference_penalty_multiplier: float = Field(
        default=0.2, ge=0, description="Extra seconds per BPM of difference between neighbours"
    )
    key_mismatch_penalty_seconds: float = Field(default=10, ge=0)
    max_transition_seconds: float = Field(default=120, ge=0)
    default_song_duration_seconds: int = Field(
        default=180, ge=1, description="Used for songs without a duration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig, description="Redis configuration"
    )
    authentication: AuthenticationConfig = Field(
        default_factory=AuthenticationConfig, description="Authentication configuration"
    )
    localization: LocalizationConfig = Field(
        default_factory=LocalizationConfig, description="Localization configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
    setlists: SetlistTimingConfig = Field(
        default_factory=SetlistTimingConfig, description="Setlist timing configuration"
    )

    @model_validator(mode="after")
    def _check_cors(self) -> ConfigData:
        if self.app.environment == "Production" and "*" in self.app.cors.origins:
            raise ValueError("CORS wildcard origin is not allowed in Production")
        return self
