"""Health and status endpoints used by load balancers and monitoring."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from loguru import logger
from starlette.responses import JSONResponse

from src.setlist_studio import __version__
from src.setlist_studio.api.http.app_data import ApplicationDependencies
from src.setlist_studio.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])

status_router = APIRouter(prefix="/api", tags=["status"])


def _health_payload() -> dict[str, Any]:
    return {
        "status": "Healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "Setlist Studio",
        "version": __version__,
    }


@router.get("")
async def health() -> dict[str, Any]:
    """Liveness probe: 200 as long as the process is serving requests."""
    return _health_payload()


@router.get("/simple")
async def health_simple() -> dict[str, str]:
    return {"status": "Healthy"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe checking the database and session storage.

    The database is critical; a failing session store only degrades the
    service because sign-in falls back to the in-memory store.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    checks: dict[str, Any] = {}
    all_healthy = True

    try:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {
            "status": "Healthy" if db_healthy else "Unhealthy",
            "type": "sqlite" if config.database.is_sqlite else "server",
            "initialized": app_deps.database_ready,
        }
        if not db_healthy:
            all_healthy = False
    except Exception as e:
        logger.warning("Database readiness check failed: {}", e)
        checks["database"] = {"status": "Unhealthy", "error": type(e).__name__}
        all_healthy = False

    try:
        storage_healthy = await app_deps.session_storage.ping()
        checks["session_storage"] = {
            "status": "Healthy" if storage_healthy else "Degraded",
            "type": app_deps.session_storage.name,
        }
    except Exception as e:
        logger.warning("Session storage readiness check failed: {}", e)
        checks["session_storage"] = {
            "status": "Degraded",
            "type": app_deps.session_storage.name,
            "error": type(e).__name__,
        }

    response = {
        "status": "Healthy" if all_healthy else "Unhealthy",
        "environment": config.app.environment,
        "checks": checks,
    }
    if not all_healthy:
        return JSONResponse(status_code=503, content=response)
    return response


@status_router.get("/health/simple")
async def api_health_simple() -> dict[str, str]:
    return {"status": "Healthy"}


@status_router.get("/status")
async def status() -> dict[str, Any]:
    payload = _health_payload()
    payload["environment"] = get_config().app.environment
    return payload


@status_router.get("/status/ping")
async def ping() -> dict[str, str]:
    return {"status": "Pong", "timestamp": datetime.now(timezone.utc).isoformat()}
