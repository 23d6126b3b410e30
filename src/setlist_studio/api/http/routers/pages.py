"""Server-rendered pages and the catch-all host page."""

from pathlib import Path
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from src.setlist_studio import __version__
from src.setlist_studio.api.http.deps import (
    get_current_principal,
    get_optional_principal,
    get_setlist_service,
    get_song_service,
)
from src.setlist_studio.core.security import sanitize_return_url
from src.setlist_studio.core.services import (
    AuthenticatedPrincipal,
    SetlistService,
    SongService,
)
from src.setlist_studio.runtime.context import get_config

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

# Login buttons, in display order
LOGIN_PROVIDERS = ("google", "microsoft", "facebook")

LOGIN_ERRORS = {
    "provider_unavailable": "That sign-in provider is not available right now.",
    "auth_failed": "Sign-in failed. Please try again.",
    "session_expired": "Your sign-in attempt expired. Please try again.",
}

router = APIRouter(tags=["pages"])

fallback_router = APIRouter(tags=["pages"])


def _page_context(request: Request, **values) -> dict:
    context = {
        "culture": getattr(request.state, "culture", get_config().localization.default_culture),
        "principal": getattr(request.state, "principal", None),
        "version": __version__,
    }
    context.update(values)
    return context


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    principal: AuthenticatedPrincipal | None = Depends(get_optional_principal),
    song_service: SongService = Depends(get_song_service),
    setlist_service: SetlistService = Depends(get_setlist_service),
):
    song_count = setlist_count = 0
    recent_setlists = []
    if principal is not None:
        _, song_count = song_service.get_songs(principal.user_id, page_size=1)
        recent_setlists, setlist_count = setlist_service.get_setlists(principal.user_id, page_size=5)

    return templates.TemplateResponse(
        request,
        "index.html",
        _page_context(
            request,
            song_count=song_count,
            setlist_count=setlist_count,
            recent_setlists=recent_setlists,
        ),
    )


@router.get("/login", response_class=HTMLResponse)
async def login(request: Request, returnUrl: str | None = None, error: str | None = None):
    config = get_config()
    return_url = sanitize_return_url(returnUrl, config.authentication.allowed_redirect_hosts)

    query = f"?{urlencode({'returnUrl': return_url})}" if return_url != "/" else ""
    providers = []
    for name in LOGIN_PROVIDERS:
        provider_config = config.authentication.providers.get(name)
        display_name = provider_config.display_name if provider_config else name.capitalize()
        providers.append(
            {"name": name, "display_name": display_name, "href": f"/auth/{name}{query}"}
        )

    return templates.TemplateResponse(
        request,
        "login.html",
        _page_context(
            request,
            providers=providers,
            error_message=LOGIN_ERRORS.get(error, LOGIN_ERRORS["auth_failed"]) if error else None,
        ),
    )


@router.get("/Identity/Account/Login")
async def identity_login(ReturnUrl: str | None = None, returnUrl: str | None = None) -> RedirectResponse:
    target = ReturnUrl or returnUrl
    url = f"/login?{urlencode({'returnUrl': target})}" if target else "/login"
    return RedirectResponse(url=url, status_code=302)


@router.get("/songs", response_class=HTMLResponse)
async def songs_page(
    request: Request,
    search: str | None = None,
    genre: str | None = None,
    page: int = 1,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    song_service: SongService = Depends(get_song_service),
):
    songs, total = song_service.get_songs(
        principal.user_id, search_term=search, genre=genre, page_number=page
    )
    return templates.TemplateResponse(
        request,
        "songs.html",
        _page_context(
            request,
            songs=songs,
            total=total,
            search=search or "",
            genre=genre or "",
            genres=song_service.get_genres(principal.user_id),
        ),
    )


@router.get("/setlists", response_class=HTMLResponse)
async def setlists_page(
    request: Request,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    setlist_service: SetlistService = Depends(get_setlist_service),
):
    setlists, total = setlist_service.get_setlists(principal.user_id, page_size=50)
    return templates.TemplateResponse(
        request,
        "setlists.html",
        _page_context(request, setlists=setlists, total=total),
    )


def _is_file_like(path: str) -> bool:
    last_segment = path.rstrip("/").rsplit("/", 1)[-1]
    return "." in last_segment.strip(".")


@fallback_router.get("/{path:path}", response_class=HTMLResponse, include_in_schema=False)
async def host_page(request: Request, path: str):
    """Serve the host page for client-side routes.

    API paths and file-like paths are real 404s so missing assets and
    endpoints are not masked by HTML.
    """
    if path == "api" or path.startswith("api/") or _is_file_like(path):
        raise HTTPException(status_code=404, detail="Not Found")

    return templates.TemplateResponse(request, "host.html", _page_context(request, path=f"/{path}"))
