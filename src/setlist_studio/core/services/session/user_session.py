import secrets

from src.setlist_studio.core.models.session import UserSession
from src.setlist_studio.core.storage.session_storage import SessionStorage


class UserSessionService:
    """Service for managing signed-in sessions behind the identity cookie."""

    def __init__(
        self,
        session_storage: SessionStorage,
        session_max_age: int = 7200,
        sliding_expiration: bool = True,
    ) -> None:
        self._storage = session_storage
        self._session_max_age = session_max_age
        self._sliding_expiration = sliding_expiration

    @property
    def session_max_age(self) -> int:
        return self._session_max_age

    @staticmethod
    def _key(session_id: str) -> str:
        return f"user:{session_id}"

    async def create_user_session(
        self,
        user_id: str,
        provider: str,
        display_name: str | None = None,
        email: str | None = None,
    ) -> str:
        """Create a user session and return its id."""
        user_session = UserSession.create(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            provider=provider,
            display_name=display_name,
            email=email,
            session_max_age=self._session_max_age,
        )
        await self._storage.set(self._key(user_session.id), user_session, self._session_max_age)
        return user_session.id

    async def get_user_session(self, session_id: str) -> UserSession | None:
        """Look up a session, renewing its lifetime when sliding expiration is on."""
        user_session = await self._storage.get(self._key(session_id), UserSession)
        if not user_session:
            return None

        if user_session.is_expired():
            await self._storage.delete(self._key(session_id))
            return None

        if self._sliding_expiration:
            user_session.touch(self._session_max_age)
            await self._storage.set(self._key(user_session.id), user_session, self._session_max_age)

        return user_session

    async def delete_user_session(self, session_id: str) -> None:
        await self._storage.delete(self._key(session_id))
