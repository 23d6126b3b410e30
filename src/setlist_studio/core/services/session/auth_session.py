import secrets

from loguru import logger

from src.setlist_studio.core.models.session import AuthSession
from src.setlist_studio.core.security import sanitize_return_url
from src.setlist_studio.core.storage.session_storage import SessionStorage


class AuthSessionService:
    """Short-lived sessions that carry state and PKCE data across a provider redirect."""

    def __init__(
        self,
        session_storage: SessionStorage,
        ttl_seconds: int = 600,
        allowed_redirect_hosts: list[str] | None = None,
    ) -> None:
        self._storage = session_storage
        self._ttl_seconds = ttl_seconds
        self._allowed_redirect_hosts = allowed_redirect_hosts or []

    @staticmethod
    def _key(session_id: str) -> str:
        return f"auth:{session_id}"

    async def create_auth_session(
        self,
        pkce_verifier: str,
        state: str,
        provider: str,
        return_to: str | None,
        client_fingerprint_hash: str,
    ) -> str:
        """Create an auth session and return its id."""
        auth_session = AuthSession.create(
            session_id=secrets.token_urlsafe(32),
            pkce_verifier=pkce_verifier,
            state=state,
            provider=provider,
            return_to=sanitize_return_url(return_to, self._allowed_redirect_hosts),
            client_fingerprint_hash=client_fingerprint_hash,
            ttl_seconds=self._ttl_seconds,
        )
        await self._storage.set(self._key(auth_session.id), auth_session, self._ttl_seconds)
        return auth_session.id

    async def get_auth_session(self, session_id: str) -> AuthSession | None:
        auth_session = await self._storage.get(self._key(session_id), AuthSession)
        if not auth_session:
            return None

        if auth_session.used or auth_session.is_expired():
            await self._storage.delete(self._key(session_id))
            return None

        return auth_session

    async def validate_auth_session(
        self,
        session_id: str,
        state: str | None,
        provider: str,
        client_fingerprint_hash: str,
    ) -> AuthSession | None:
        """Return the session when state, provider and fingerprint all match.

        A mismatch deletes the session so it cannot be retried.
        """
        if not state:
            return None

        auth_session = await self.get_auth_session(session_id)
        if not auth_session:
            return None

        if state != auth_session.state or provider != auth_session.provider:
            logger.warning("Auth session {} rejected: state or provider mismatch", session_id[:8])
            await self.delete_auth_session(session_id)
            return None

        if client_fingerprint_hash != auth_session.client_fingerprint_hash:
            logger.warning("Auth session {} rejected: client fingerprint mismatch", session_id[:8])
            await self.delete_auth_session(session_id)
            return None

        return auth_session

    async def mark_auth_session_used(self, session_id: str) -> None:
        auth_session = await self._storage.get(self._key(session_id), AuthSession)
        if auth_session:
            auth_session.mark_used()
            await self._storage.set(self._key(auth_session.id), auth_session, self._ttl_seconds)

    async def delete_auth_session(self, session_id: str) -> None:
        await self._storage.delete(self._key(session_id))
