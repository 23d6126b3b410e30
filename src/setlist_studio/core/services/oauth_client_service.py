"""OAuth 2.0 client for the external login providers (authorization code + PKCE)."""

import time
from urllib.parse import urlencode

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from src.setlist_studio.runtime.config.config_data import ExternalProviderConfig


class TokenResponse(BaseModel):
    """Token endpoint response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    id_token: str | None = None

    @property
    def expires_at(self) -> int | None:
        if self.expires_in is None:
            return None
        return int(time.time()) + self.expires_in


class ExternalLoginInfo(BaseModel):
    """Profile of a user as reported by an external provider."""

    provider: str = Field(description="Provider scheme, e.g. 'google'")
    provider_display_name: str
    provider_key: str = Field(description="Stable user id at the provider")
    display_name: str | None = None
    email: str | None = None
    picture_url: str | None = None


class OAuthClientError(Exception):
    """Raised when a provider round trip cannot be completed."""


class OAuthClientService:
    def __init__(self, providers: dict[str, ExternalProviderConfig], timeout: float = 10.0) -> None:
        self._providers = providers
        self._timeout = timeout

    def get_provider(self, provider: str) -> ExternalProviderConfig | None:
        """Return the provider config when it exists and has usable credentials."""
        provider_config = self._providers.get(provider)
        if provider_config is None or not provider_config.is_configured:
            return None
        return provider_config

    def build_authorization_url(
        self,
        provider: str,
        redirect_uri: str,
        state: str,
        code_challenge: str | None = None,
    ) -> str:
        provider_config = self.get_provider(provider)
        if provider_config is None:
            raise OAuthClientError(f"Provider '{provider}' is not configured")

        params = {
            "response_type": "code",
            "client_id": provider_config.client_id,
            "redirect_uri": redirect_uri,
            "scope": " ".join(provider_config.scopes),
            "state": state,
        }
        if provider_config.use_pkce and code_challenge:
            params["code_challenge"] = code_challenge
            params["code_challenge_method"] = "S256"

        separator = "&" if "?" in provider_config.authorization_endpoint else "?"
        return f"{provider_config.authorization_endpoint}{separator}{urlencode(params)}"

    async def exchange_code_for_tokens(
        self,
        provider: str,
        code: str,
        redirect_uri: str,
        pkce_verifier: str | None = None,
    ) -> TokenResponse:
        """Exchange an authorization code for tokens."""
        provider_config = self.get_provider(provider)
        if provider_config is None:
            raise OAuthClientError(f"Provider '{provider}' is not configured")

        token_data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": provider_config.client_id,
            "client_secret": provider_config.client_secret,
        }
        if provider_config.use_pkce and pkce_verifier:
            token_data["code_verifier"] = pkce_verifier

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    provider_config.token_endpoint,
                    data=token_data,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                return TokenResponse(**response.json())
        except httpx.HTTPError as e:
            logger.warning("Token exchange with {} failed: {}", provider, e)
            raise OAuthClientError(f"Token exchange with {provider} failed") from e

    async def fetch_external_login(self, provider: str, access_token: str) -> ExternalLoginInfo:
        """Call the userinfo endpoint and map its fields onto an ExternalLoginInfo."""
        provider_config = self.get_provider(provider)
        if provider_config is None:
            raise OAuthClientError(f"Provider '{provider}' is not configured")

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    provider_config.userinfo_endpoint,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                response.raise_for_status()
                profile = response.json()
        except httpx.HTTPError as e:
            logger.warning("Userinfo request to {} failed: {}", provider, e)
            raise OAuthClientError(f"Userinfo request to {provider} failed") from e

        provider_key = profile.get(provider_config.id_field)
        if not provider_key:
            raise OAuthClientError(
                f"{provider} profile has no '{provider_config.id_field}' field"
            )

        picture = profile.get(provider_config.picture_field) if provider_config.picture_field else None
        return ExternalLoginInfo(
            provider=provider,
            provider_display_name=provider_config.display_name,
            provider_key=str(provider_key),
            display_name=profile.get(provider_config.name_field),
            email=profile.get(provider_config.email_field),
            picture_url=picture if isinstance(picture, str) else None,
        )
