from dataclasses import dataclass

from src.setlist_studio.core.services import (
    AuthenticationStrategy,
    AuthSessionService,
    DbSessionService,
    OAuthClientService,
    UserSessionService,
)
from src.setlist_studio.core.storage import SessionStorage
from src.setlist_studio.runtime.startup_policy import StartupPolicy


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    session_storage: SessionStorage
    auth_session_service: AuthSessionService
    user_session_service: UserSessionService
    oauth_client_service: OAuthClientService
    authentication_strategy: AuthenticationStrategy
    startup_policy: StartupPolicy
    database_ready: bool = False
