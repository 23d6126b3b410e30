"""ApplicationUser repository."""

from sqlmodel import Session, func, select

from .entity import ApplicationUser
from .table import ApplicationUserTable


class ApplicationUserRepository:
    """Data-access layer for users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> ApplicationUser | None:
        row = self._session.get(ApplicationUserTable, user_id)
        if row is None:
            return None
        return ApplicationUser.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> ApplicationUser | None:
        statement = select(ApplicationUserTable).where(
            func.lower(ApplicationUserTable.email) == email.lower()
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return ApplicationUser.model_validate(row, from_attributes=True)

    def create(self, user: ApplicationUser) -> ApplicationUser:
        row = ApplicationUserTable(**user.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return ApplicationUser.model_validate(row, from_attributes=True)

    def update(self, user: ApplicationUser) -> ApplicationUser:
        row = self._session.get(ApplicationUserTable, user.id)
        if row is None:
            raise ValueError(f"User {user.id} not found")
        for field in ("display_name", "email", "profile_picture_url", "provider", "provider_key"):
            setattr(row, field, getattr(user, field))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return ApplicationUser.model_validate(row, from_attributes=True)

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(ApplicationUserTable)).one()
