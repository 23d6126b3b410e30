"""FastAPI application setup: services, middleware pipeline and routes."""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import urlencode

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, RedirectResponse

from src.setlist_studio import __version__
from src.setlist_studio.api.http.app_data import ApplicationDependencies
from src.setlist_studio.api.http.middleware.localization import LocalizationMiddleware
from src.setlist_studio.api.http.routers import auth, health, pages, realtime
from src.setlist_studio.api.http.routers.service import setlist, song
from src.setlist_studio.api.utils.app_startup import configure_logging
from src.setlist_studio.core.services import (
    AuthSessionService,
    CookieAuthenticationStrategy,
    DatabaseInitializer,
    DbSessionService,
    NotAuthenticatedError,
    OAuthClientService,
    UserSessionService,
)
from src.setlist_studio.core.services.database.dev_seed import seed_development_data
from src.setlist_studio.core.storage import RedisSessionStorage, create_session_storage
from src.setlist_studio.runtime.context import get_config
from src.setlist_studio.runtime.startup_policy import (
    StartupPolicy,
    handle_database_initialization_error,
)

# Initialize logging
configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        config = get_config()
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-XSS-Protection", "1; mode=block")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Permissions-Policy", config.security.permissions_policy)
        response.headers.setdefault(
            "Content-Security-Policy", config.security.content_security_policy
        )
        if config.app.is_hardened:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="Setlist Studio",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if get_config().app.is_hardened else "/docs",
    redoc_url=None if get_config().app.is_hardened else "/redoc",
)

__all__ = ["app", "startup", "shutdown", "initialize_database"]

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LocalizationMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


# --- Identity cookie renewal ---
@app.middleware("http")
async def refresh_identity_cookie(request: Request, call_next):
    response = await call_next(request)
    session_id = getattr(request.state, "session_id", None)
    cookie = get_config().authentication.cookie
    if session_id and cookie.sliding_expiration:
        auth.set_identity_cookie(response, session_id, cookie.expire_minutes * 60)
    return response


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    # Query strings are left out; they can carry OAuth codes
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


@app.exception_handler(NotAuthenticatedError)
async def handle_not_authenticated(request: Request, exc: NotAuthenticatedError):
    """401 for API callers; browsers are sent to the login page."""
    if request.url.path.startswith("/api/"):
        return JSONResponse(status_code=401, content={"detail": "Not authenticated"})

    return_url = request.url.path
    if request.url.query:
        return_url = f"{return_url}?{request.url.query}"
    login_path = get_config().authentication.cookie.login_path
    return RedirectResponse(
        url=f"{login_path}?{urlencode({'returnUrl': return_url})}", status_code=302
    )


# --- Router registration ---
app.include_router(health.router)
app.include_router(health.status_router)
app.include_router(auth.router)
app.include_router(song.router, prefix="/api")
app.include_router(setlist.router, prefix="/api")
app.include_router(realtime.router)
app.include_router(pages.router)

app.mount(
    "/static",
    StaticFiles(directory=str(Path(__file__).resolve().parent / "static")),
    name="static",
)

# The catch-all host page must stay last
app.include_router(pages.fallback_router)


def initialize_database(
    database_service: DbSessionService, policy: StartupPolicy, seed_sample_data: bool
) -> bool:
    """Create the schema (and sample data when asked); True when the database is usable.

    Failures are handed to the startup policy, which either re-raises them
    as ``DatabaseInitializationError`` or lets startup continue.
    """
    try:
        DatabaseInitializer(database_service).initialize()
        if seed_sample_data:
            with database_service.session_scope() as session:
                seed_development_data(session)
        return True
    except Exception as error:
        handle_database_initialization_error(error, policy)
        return False


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up Setlist Studio in {} environment", config.app.environment)

    cookie_config = config.authentication.cookie
    session_storage = await create_session_storage(config.redis)
    database_service = DbSessionService(config.database, config.app.environment)
    user_session_service = UserSessionService(
        session_storage,
        session_max_age=cookie_config.expire_minutes * 60,
        sliding_expiration=cookie_config.sliding_expiration,
    )

    deps = ApplicationDependencies(
        database_service=database_service,
        session_storage=session_storage,
        auth_session_service=AuthSessionService(
            session_storage,
            ttl_seconds=config.security.auth_session_ttl_seconds,
            allowed_redirect_hosts=config.authentication.allowed_redirect_hosts,
        ),
        user_session_service=user_session_service,
        oauth_client_service=OAuthClientService(config.authentication.providers),
        authentication_strategy=CookieAuthenticationStrategy(
            user_session_service, cookie_config.resolve_name(config.app.environment)
        ),
        startup_policy=StartupPolicy.from_app_config(config.app),
    )
    app.state.app_dependencies = deps

    deps.database_ready = initialize_database(
        database_service, deps.startup_policy, seed_sample_data=config.app.is_development
    )


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is None:
        return

    removed = await app_dependencies.session_storage.cleanup_expired()
    if removed:
        logger.debug("Removed {} expired sessions", removed)
    if isinstance(app_dependencies.session_storage, RedisSessionStorage):
        await app_dependencies.session_storage.close()
    app_dependencies.database_service.dispose()


if __name__ == "__main__":
    import uvicorn

    # Access logs come from log_requests
    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,
    )
