"""Unit tests for security helpers."""

import base64
import hashlib

import pytest

from src.setlist_studio.core.security import (
    extract_client_fingerprint,
    generate_pkce_pair,
    generate_state,
    hash_client_fingerprint,
    sanitize_return_url,
)


class TestPkce:
    def test_challenge_matches_verifier(self):
        """The challenge is the unpadded base64url SHA256 of the verifier."""
        verifier, challenge = generate_pkce_pair()
        expected = (
            base64.urlsafe_b64encode(hashlib.sha256(verifier.encode()).digest())
            .decode()
            .rstrip("=")
        )
        assert challenge == expected

    def test_values_are_unique(self):
        assert generate_pkce_pair()[0] != generate_pkce_pair()[0]
        assert generate_state() != generate_state()


class TestSanitizeReturnUrl:
    @pytest.mark.parametrize("url", ["/", "/songs", "/setlists?page=2"])
    def test_relative_paths_kept(self, url):
        assert sanitize_return_url(url) == url

    @pytest.mark.parametrize(
        "url",
        [
            None,
            "",
            "//evil.example.com",
            "/\\evil.example.com",
            "https://evil.example.com/",
            "javascript:alert(1)",
            "/songs\r\nSet-Cookie: x=1",
        ],
    )
    def test_unsafe_values_become_root(self, url):
        assert sanitize_return_url(url) == "/"

    def test_allowed_absolute_host(self):
        url = "https://app.setliststudio.com/setlists"
        assert sanitize_return_url(url, ["app.setliststudio.com"]) == url
        assert sanitize_return_url(url, ["other.example.com"]) == "/"


class TestClientFingerprint:
    def test_forwarded_for_first_hop_is_used(self, request_factory):
        request = request_factory(
            headers={"user-agent": "pytest", "x-forwarded-for": "203.0.113.5, 10.0.0.1"}
        )
        assert extract_client_fingerprint(request) == hash_client_fingerprint(
            "pytest", "203.0.113.5"
        )

    def test_falls_back_to_socket_address(self, request_factory):
        request = request_factory(headers={"user-agent": "pytest"}, client=("198.51.100.7", 1234))
        assert extract_client_fingerprint(request) == hash_client_fingerprint(
            "pytest", "198.51.100.7"
        )

    def test_unknown_client_still_hashes(self):
        assert len(hash_client_fingerprint(None, None)) == 64
