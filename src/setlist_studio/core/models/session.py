"""Server-side session models."""

import time

from pydantic import BaseModel, Field


class AuthSession(BaseModel):
    """Temporary session for one external-provider round trip."""

    id: str = Field(description="Session identifier")
    pkce_verifier: str = Field(description="PKCE code verifier")
    state: str = Field(description="CSRF state parameter")
    provider: str = Field(description="External provider scheme")
    return_to: str = Field(description="Sanitized post-auth redirect URL")
    client_fingerprint_hash: str = Field(description="Client context fingerprint")
    created_at: int = Field(description="Creation timestamp")
    expires_at: int = Field(description="Expiration timestamp")
    used: bool = Field(default=False, description="Whether session has been used")

    @classmethod
    def create(
        cls,
        session_id: str,
        pkce_verifier: str,
        state: str,
        provider: str,
        return_to: str,
        client_fingerprint_hash: str,
        ttl_seconds: int = 600,
    ) -> "AuthSession":
        now = int(time.time())
        return cls(
            id=session_id,
            pkce_verifier=pkce_verifier,
            state=state,
            provider=provider,
            return_to=return_to,
            client_fingerprint_hash=client_fingerprint_hash,
            created_at=now,
            expires_at=now + ttl_seconds,
        )

    def is_expired(self) -> bool:
        return time.time() > self.expires_at

    def mark_used(self) -> None:
        """Single-use enforcement for the callback."""
        self.used = True


class UserSession(BaseModel):
    """Signed-in session referenced by the identity cookie."""

    id: str = Field(description="Session identifier")
    user_id: str = Field(description="Internal user ID")
    provider: str = Field(description="Provider used to sign in")
    display_name: str | None = Field(default=None)
    email: str | None = Field(default=None)
    created_at: int = Field(description="Creation timestamp")
    last_accessed_at: int = Field(description="Last access timestamp")
    expires_at: int = Field(description="Session expiration timestamp")

    @classmethod
    def create(
        cls,
        session_id: str,
        user_id: str,
        provider: str,
        display_name: str | None = None,
        email: str | None = None,
        session_max_age: int = 7200,
    ) -> "UserSession":
        now = int(time.time())
        return cls(
            id=session_id,
            user_id=user_id,
            provider=provider,
            display_name=display_name,
            email=email,
            created_at=now,
            last_accessed_at=now,
            expires_at=now + session_max_age,
        )

    def is_expired(self) -> bool:
        return time.time() > self.expires_at

    def touch(self, session_max_age: int) -> None:
        """Sliding expiration: push the expiry out from now."""
        now = int(time.time())
        self.last_accessed_at = now
        self.expires_at = now + session_max_age
