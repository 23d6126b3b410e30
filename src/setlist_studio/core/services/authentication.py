"""Pluggable request authentication.

The application resolves one ``AuthenticationStrategy`` per request through
dependency injection; tests swap in ``StaticAuthenticationStrategy``.
"""

from abc import ABC, abstractmethod

from fastapi import Request
from pydantic import BaseModel, Field

from src.setlist_studio.core.services.session.user_session import UserSessionService


class AuthenticatedPrincipal(BaseModel):
    """The signed-in user as seen by request handlers."""

    user_id: str = Field(description="Internal user ID (name identifier)")
    name: str = Field(description="Display name")
    email: str | None = Field(default=None)
    authentication_type: str = Field(default="Cookies")


class NotAuthenticatedError(Exception):
    """Raised when a protected route is reached without a principal."""


class AuthenticationStrategy(ABC):
    @abstractmethod
    async def authenticate(self, request: Request) -> AuthenticatedPrincipal | None:
        """Return the principal for this request, or None when anonymous."""


class CookieAuthenticationStrategy(AuthenticationStrategy):
    """Resolves the identity cookie against server-side user sessions."""

    def __init__(self, user_session_service: UserSessionService, cookie_name: str) -> None:
        self._user_sessions = user_session_service
        self._cookie_name = cookie_name

    async def authenticate(self, request: Request) -> AuthenticatedPrincipal | None:
        session_id = request.cookies.get(self._cookie_name)
        if not session_id:
            return None

        user_session = await self._user_sessions.get_user_session(session_id)
        if user_session is None:
            return None

        request.state.session_id = session_id
        return AuthenticatedPrincipal(
            user_id=user_session.user_id,
            name=user_session.display_name or user_session.email or user_session.user_id,
            email=user_session.email,
        )


class StaticAuthenticationStrategy(AuthenticationStrategy):
    """Always authenticates the same principal."""

    def __init__(self, name: str, identifier: str, email: str | None = None) -> None:
        self._principal = AuthenticatedPrincipal(
            user_id=identifier, name=name, email=email, authentication_type="Test"
        )

    async def authenticate(self, request: Request) -> AuthenticatedPrincipal | None:
        return self._principal
