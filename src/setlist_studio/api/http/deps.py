"""FastAPI dependency implementations.

Business services are built per request: FastAPI caches a dependency for
the duration of one request, so every consumer in that request shares the
same instance and the next request gets a fresh one.
"""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.setlist_studio.api.http.app_data import ApplicationDependencies
from src.setlist_studio.core.services import (
    AuthenticatedPrincipal,
    AuthenticationStrategy,
    AuthSessionService,
    NotAuthenticatedError,
    OAuthClientService,
    PerformanceDateService,
    SetlistDurationService,
    SetlistExportService,
    SetlistService,
    SongService,
    UserManagementService,
    UserSessionService,
)
from src.setlist_studio.runtime.context import get_config


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session that is closed when the request ends."""
    app_deps = get_app_dependencies(request)
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_song_service(db: Session = Depends(get_db_session)) -> SongService:
    return SongService(db)


def get_setlist_service(db: Session = Depends(get_db_session)) -> SetlistService:
    return SetlistService(db)


def get_export_service(db: Session = Depends(get_db_session)) -> SetlistExportService:
    return SetlistExportService(db)


def get_performance_date_service(db: Session = Depends(get_db_session)) -> PerformanceDateService:
    return PerformanceDateService(db)


def get_duration_service(db: Session = Depends(get_db_session)) -> SetlistDurationService:
    return SetlistDurationService(db, get_config().setlists)


def get_user_management_service(db: Session = Depends(get_db_session)) -> UserManagementService:
    return UserManagementService(db)


def get_auth_session_service(request: Request) -> AuthSessionService:
    return get_app_dependencies(request).auth_session_service


def get_user_session_service(request: Request) -> UserSessionService:
    return get_app_dependencies(request).user_session_service


def get_oauth_client_service(request: Request) -> OAuthClientService:
    return get_app_dependencies(request).oauth_client_service


def get_authentication_strategy(request: Request) -> AuthenticationStrategy:
    """The configured strategy; tests override this dependency."""
    return get_app_dependencies(request).authentication_strategy


async def get_optional_principal(
    request: Request,
    strategy: AuthenticationStrategy = Depends(get_authentication_strategy),
) -> AuthenticatedPrincipal | None:
    principal = await strategy.authenticate(request)
    request.state.principal = principal
    return principal


async def get_current_principal(
    principal: AuthenticatedPrincipal | None = Depends(get_optional_principal),
) -> AuthenticatedPrincipal:
    """Require a signed-in user.

    Raises:
        NotAuthenticatedError: Turned into 401 for API routes and a login redirect for pages.
    """
    if principal is None:
        raise NotAuthenticatedError()
    return principal
