"""Core services exports."""

from src.setlist_studio.core.storage.session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
)

from .authentication import (
    AuthenticatedPrincipal,
    AuthenticationStrategy,
    CookieAuthenticationStrategy,
    NotAuthenticatedError,
    StaticAuthenticationStrategy,
)
from .database.db_initializer import DatabaseInitializer
from .database.db_session import DbSessionService
from .library import (
    PerformanceDateService,
    SetlistDurationService,
    SetlistExportService,
    SetlistService,
    SongService,
)
from .oauth_client_service import ExternalLoginInfo, OAuthClientError, OAuthClientService
from .session.auth_session import AuthSessionService
from .session.user_session import UserSessionService
from .user.user_management import UserManagementService

__all__ = [
    # Authentication
    "AuthenticatedPrincipal",
    "AuthenticationStrategy",
    "CookieAuthenticationStrategy",
    "NotAuthenticatedError",
    "StaticAuthenticationStrategy",
    # External login
    "ExternalLoginInfo",
    "OAuthClientError",
    "OAuthClientService",
    "UserManagementService",
    # Sessions
    "AuthSessionService",
    "UserSessionService",
    "InMemorySessionStorage",
    "RedisSessionStorage",
    # Database
    "DatabaseInitializer",
    "DbSessionService",
    # Library
    "PerformanceDateService",
    "SetlistDurationService",
    "SetlistExportService",
    "SetlistService",
    "SongService",
]
