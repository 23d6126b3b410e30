"""Unit tests for authentication strategies."""

import pytest

from src.setlist_studio.core.services import (
    CookieAuthenticationStrategy,
    StaticAuthenticationStrategy,
)

COOKIE_NAME = "SetlistStudio-Identity"


class TestCookieAuthenticationStrategy:
    @pytest.mark.asyncio
    async def test_valid_cookie_resolves_principal(self, user_session_service, request_factory):
        session_id = await user_session_service.create_user_session(
            user_id="u1", provider="google", display_name="Ada Lovelace", email="ada@example.com"
        )
        strategy = CookieAuthenticationStrategy(user_session_service, COOKIE_NAME)
        request = request_factory(cookies={COOKIE_NAME: session_id})

        principal = await strategy.authenticate(request)

        assert principal is not None
        assert principal.user_id == "u1"
        assert principal.name == "Ada Lovelace"
        assert principal.email == "ada@example.com"
        assert principal.authentication_type == "Cookies"
        assert request.state.session_id == session_id

    @pytest.mark.asyncio
    async def test_name_falls_back_to_email(self, user_session_service, request_factory):
        session_id = await user_session_service.create_user_session(
            user_id="u1", provider="google", email="ada@example.com"
        )
        strategy = CookieAuthenticationStrategy(user_session_service, COOKIE_NAME)

        principal = await strategy.authenticate(request_factory(cookies={COOKIE_NAME: session_id}))

        assert principal is not None
        assert principal.name == "ada@example.com"

    @pytest.mark.asyncio
    async def test_missing_cookie_is_anonymous(self, user_session_service, request_factory):
        strategy = CookieAuthenticationStrategy(user_session_service, COOKIE_NAME)
        assert await strategy.authenticate(request_factory()) is None

    @pytest.mark.asyncio
    async def test_unknown_session_is_anonymous(self, user_session_service, request_factory):
        strategy = CookieAuthenticationStrategy(user_session_service, COOKIE_NAME)
        request = request_factory(cookies={COOKIE_NAME: "forged"})
        assert await strategy.authenticate(request) is None


class TestStaticAuthenticationStrategy:
    @pytest.mark.asyncio
    async def test_always_returns_configured_principal(self, request_factory):
        strategy = StaticAuthenticationStrategy("Test User", "test-user-id", "test@example.com")

        first = await strategy.authenticate(request_factory())
        second = await strategy.authenticate(request_factory(cookies={COOKIE_NAME: "x"}))

        assert first == second
        assert first.user_id == "test-user-id"
        assert first.name == "Test User"
        assert first.email == "test@example.com"
        assert first.authentication_type == "Test"
