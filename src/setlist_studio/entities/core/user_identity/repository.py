"""User identity repository."""

from sqlmodel import Session, select

from .entity import UserIdentity
from .table import UserIdentityTable


class UserIdentityRepository:
    """Data-access layer for user identities."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_provider_key(self, provider: str, provider_key: str) -> UserIdentity | None:
        statement = select(UserIdentityTable).where(
            (UserIdentityTable.provider == provider)
            & (UserIdentityTable.provider_key == provider_key)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return UserIdentity.model_validate(row, from_attributes=True)

    def get_for_user(self, user_id: str, provider: str) -> UserIdentity | None:
        statement = select(UserIdentityTable).where(
            (UserIdentityTable.user_id == user_id) & (UserIdentityTable.provider == provider)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return UserIdentity.model_validate(row, from_attributes=True)

    def list_for_user(self, user_id: str) -> list[UserIdentity]:
        statement = select(UserIdentityTable).where(UserIdentityTable.user_id == user_id)
        return [
            UserIdentity.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement).all()
        ]

    def create(self, identity: UserIdentity) -> UserIdentity:
        """Persist a new identity.

        Raises:
            ValueError: If the user already has an identity for this provider.
        """
        if self.get_for_user(identity.user_id, identity.provider) is not None:
            raise ValueError(
                f"User {identity.user_id} already has a {identity.provider} identity"
            )
        row = UserIdentityTable(**identity.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return UserIdentity.model_validate(row, from_attributes=True)
