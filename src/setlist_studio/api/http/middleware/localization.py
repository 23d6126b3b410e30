"""Request culture negotiation."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from src.setlist_studio.runtime.config.config_data import LocalizationConfig
from src.setlist_studio.runtime.context import get_config


def parse_accept_language(header: str | None) -> list[str]:
    """Language tags from an ``Accept-Language`` header, highest quality first."""
    if not header:
        return []

    weighted = []
    for index, part in enumerate(header.split(",")):
        tag, _, params = part.strip().partition(";")
        tag = tag.strip()
        if not tag or tag == "*":
            continue
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        if quality > 0:
            weighted.append((-quality, index, tag))

    return [tag for _, _, tag in sorted(weighted)]


def match_culture(candidate: str | None, supported: list[str]) -> str | None:
    """Exact (case-insensitive) match first, then by language prefix."""
    if not candidate:
        return None
    lowered = candidate.lower()
    for culture in supported:
        if culture.lower() == lowered:
            return culture
    language = lowered.split("-")[0]
    for culture in supported:
        if culture.lower().split("-")[0] == language:
            return culture
    return None


def negotiate_culture(request: Request, config: LocalizationConfig) -> str:
    """Query string, then cookie, then ``Accept-Language``, then the default."""
    supported = config.supported_cultures

    for candidate in (
        request.query_params.get("culture"),
        request.cookies.get(config.cookie_name),
    ):
        culture = match_culture(candidate, supported)
        if culture:
            return culture

    for tag in parse_accept_language(request.headers.get("accept-language")):
        culture = match_culture(tag, supported)
        if culture:
            return culture

    return config.default_culture


class LocalizationMiddleware(BaseHTTPMiddleware):
    """Negotiate the request culture.

    Without an explicit ``config`` the localization settings of the current
    application context are read on every request.
    """

    def __init__(self, app, config: LocalizationConfig | None = None) -> None:
        super().__init__(app)
        self._config = config

    async def dispatch(self, request: Request, call_next):
        config = self._config if self._config is not None else get_config().localization
        culture = negotiate_culture(request, config)
        request.state.culture = culture

        response = await call_next(request)
        response.headers.setdefault("Content-Language", culture)

        # An explicit choice is remembered for later requests
        requested = match_culture(request.query_params.get("culture"), config.supported_cultures)
        if requested:
            response.set_cookie(
                config.cookie_name,
                requested,
                max_age=365 * 24 * 3600,
                httponly=False,
                samesite="lax",
            )
        return response
