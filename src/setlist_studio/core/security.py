"""Security utilities for the external login flow."""

import base64
import hashlib
import secrets
from urllib.parse import urlparse

from fastapi import Request


def generate_secure_token(length: int = 32) -> str:
    """Generate a URL-safe token from ``length`` random bytes."""
    return base64.urlsafe_b64encode(secrets.token_bytes(length)).decode("utf-8").rstrip("=")


def generate_state() -> str:
    """State parameter for CSRF protection of the provider callback."""
    return generate_secure_token(32)


def generate_pkce_pair() -> tuple[str, str]:
    """Generate PKCE code verifier and S256 challenge.

    Returns:
        Tuple of (code_verifier, code_challenge)
    """
    code_verifier = generate_secure_token(32)
    challenge_bytes = hashlib.sha256(code_verifier.encode("utf-8")).digest()
    code_challenge = base64.urlsafe_b64encode(challenge_bytes).decode("utf-8").rstrip("=")
    return code_verifier, code_challenge


def sanitize_return_url(return_to: str | None, allowed_hosts: list[str] | None = None) -> str:
    """Sanitize a return URL to prevent open redirects.

    Relative paths are kept; absolute URLs only when their host is allowed.
    Anything else becomes ``/``.
    """
    if not return_to:
        return "/"

    return_to = return_to.strip()

    if return_to.startswith("/") and not return_to.startswith("//") and "\\" not in return_to:
        if all(ord(c) >= 32 for c in return_to):
            return return_to

    if allowed_hosts and return_to.startswith(("http://", "https://")):
        parsed = urlparse(return_to)
        if parsed.hostname in allowed_hosts:
            return return_to

    return "/"


def hash_client_fingerprint(user_agent: str | None, client_ip: str | None = None) -> str:
    """SHA256 of the client's user agent and IP, used to bind the auth round trip."""
    components = []

    if user_agent:
        components.append(user_agent.strip())

    if client_ip:
        components.append(client_ip.strip())

    if not components:
        components.append("unknown-client")

    return hashlib.sha256("|".join(components).encode("utf-8")).hexdigest()


def extract_client_fingerprint(request: Request) -> str:
    """Extract and hash the client fingerprint, honouring proxy headers."""
    user_agent = request.headers.get("user-agent")

    client_ip = None
    for header in ("x-forwarded-for", "x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            # First hop of a comma separated chain
            client_ip = value.split(",")[0].strip()
            break

    if not client_ip and request.client:
        client_ip = request.client.host

    return hash_client_fingerprint(user_agent, client_ip)
