"""External login (Google, Microsoft, Facebook) and sign-out endpoints."""

from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from loguru import logger

from src.setlist_studio.api.http.deps import (
    get_auth_session_service,
    get_oauth_client_service,
    get_user_management_service,
    get_user_session_service,
)
from src.setlist_studio.core.security import (
    extract_client_fingerprint,
    generate_pkce_pair,
    generate_state,
)
from src.setlist_studio.core.services import (
    AuthSessionService,
    OAuthClientService,
    UserManagementService,
    UserSessionService,
)
from src.setlist_studio.runtime.context import get_config

AUTH_SESSION_COOKIE = "auth_session_id"

router = APIRouter(tags=["auth"])


def identity_cookie_name() -> str:
    config = get_config()
    return config.authentication.cookie.resolve_name(config.app.environment)


def _cookie_is_secure() -> bool:
    return get_config().app.environment not in ("Development", "Test")


def _auth_flow_cookie_settings() -> dict[str, Any]:
    """The provider redirects back with a top-level GET, which SameSite=Lax allows."""
    return {
        "httponly": True,
        "secure": _cookie_is_secure(),
        "samesite": "lax",
        "path": "/",
    }


def set_identity_cookie(response: Response, session_id: str, max_age: int) -> None:
    response.set_cookie(
        key=identity_cookie_name(),
        value=session_id,
        max_age=max_age,
        httponly=True,
        secure=_cookie_is_secure(),
        samesite=get_config().authentication.cookie.same_site,
        path="/",
    )


def _login_error(error: str) -> RedirectResponse:
    response = RedirectResponse(
        url=f"/login?{urlencode({'error': error})}", status_code=status.HTTP_302_FOUND
    )
    response.delete_cookie(AUTH_SESSION_COOKIE, path="/")
    return response


def _callback_uri(request: Request, callback_path: str) -> str:
    return f"{str(request.base_url).rstrip('/')}{callback_path}"


@router.get("/auth/{provider}")
async def challenge(
    request: Request,
    provider: str,
    returnUrl: str | None = None,
    auth_session_service: AuthSessionService = Depends(get_auth_session_service),
    oauth_client_service: OAuthClientService = Depends(get_oauth_client_service),
) -> RedirectResponse:
    """Start an external login with state, PKCE and client fingerprint binding."""
    provider_config = oauth_client_service.get_provider(provider)
    if provider_config is None:
        logger.warning("Sign-in requested for unavailable provider {}", provider)
        return _login_error("provider_unavailable")

    pkce_verifier, pkce_challenge = generate_pkce_pair()
    state = generate_state()

    session_id = await auth_session_service.create_auth_session(
        pkce_verifier=pkce_verifier,
        state=state,
        provider=provider,
        return_to=returnUrl,
        client_fingerprint_hash=extract_client_fingerprint(request),
    )

    auth_url = oauth_client_service.build_authorization_url(
        provider,
        redirect_uri=_callback_uri(request, provider_config.callback_path),
        state=state,
        code_challenge=pkce_challenge,
    )

    response = RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=AUTH_SESSION_COOKIE,
        value=session_id,
        max_age=get_config().security.auth_session_ttl_seconds,
        **_auth_flow_cookie_settings(),
    )
    return response


@router.get("/signin-{provider}")
async def callback(
    request: Request,
    provider: str,
    state: str | None = None,
    code: str | None = None,
    error: str | None = None,
    auth_session_service: AuthSessionService = Depends(get_auth_session_service),
    user_session_service: UserSessionService = Depends(get_user_session_service),
    oauth_client_service: OAuthClientService = Depends(get_oauth_client_service),
    user_service: UserManagementService = Depends(get_user_management_service),
) -> RedirectResponse:
    """Complete an external login and sign the user in with the identity cookie."""
    provider_config = oauth_client_service.get_provider(provider)
    if provider_config is None:
        return _login_error("provider_unavailable")

    session_id = request.cookies.get(AUTH_SESSION_COOKIE)
    if not session_id:
        logger.warning("Callback from {} without an auth session", provider)
        return _login_error("session_expired")

    auth_session = await auth_session_service.validate_auth_session(
        session_id=session_id,
        state=state,
        provider=provider,
        client_fingerprint_hash=extract_client_fingerprint(request),
    )
    if auth_session is None:
        return _login_error("session_expired")

    # Provider errors are only honoured once the state has been validated
    if error or not code:
        logger.warning("{} sign-in returned no code (error={})", provider, error)
        await auth_session_service.delete_auth_session(session_id)
        return _login_error("auth_failed")

    try:
        await auth_session_service.mark_auth_session_used(session_id)

        tokens = await oauth_client_service.exchange_code_for_tokens(
            provider,
            code=code,
            redirect_uri=_callback_uri(request, provider_config.callback_path),
            pkce_verifier=auth_session.pkce_verifier,
        )
        login_info = await oauth_client_service.fetch_external_login(provider, tokens.access_token)
        user = user_service.provision_user(login_info)

        user_session_id = await user_session_service.create_user_session(
            user_id=user.id,
            provider=provider,
            display_name=user.display_name,
            email=user.email,
        )
    except Exception:
        await auth_session_service.delete_auth_session(session_id)
        logger.exception("Authentication failed during {} callback", provider)
        return _login_error("auth_failed")

    await auth_session_service.delete_auth_session(session_id)
    logger.info("User {} signed in with {}", user.id, provider)

    response = RedirectResponse(url=auth_session.return_to or "/", status_code=status.HTTP_302_FOUND)
    set_identity_cookie(response, user_session_id, user_session_service.session_max_age)
    response.delete_cookie(AUTH_SESSION_COOKIE, path="/")
    return response


@router.api_route("/logout", methods=["GET", "POST"])
@router.api_route("/Identity/Account/Logout", methods=["GET", "POST"])
async def logout(
    request: Request,
    user_session_service: UserSessionService = Depends(get_user_session_service),
) -> RedirectResponse:
    """End the server-side session and clear the identity cookie."""
    cookie_name = identity_cookie_name()
    session_id = request.cookies.get(cookie_name)
    if session_id:
        await user_session_service.delete_user_session(session_id)
        logger.info("User session ended")

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(cookie_name, path="/")
    return response
