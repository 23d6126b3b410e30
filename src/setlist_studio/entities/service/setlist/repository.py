"""Setlist repository."""

from sqlmodel import Session, func, or_, select

from src.setlist_studio.entities.service.performance_date.repository import PerformanceDateRepository
from src.setlist_studio.entities.service.setlist_song.repository import SetlistSongRepository

from .entity import Setlist
from .table import SetlistTable

_EDITABLE_FIELDS = (
    "name",
    "description",
    "venue",
    "performance_date",
    "expected_duration_minutes",
    "is_template",
    "is_active",
    "performance_notes",
)


class SetlistRepository:
    """Data-access layer for setlists. Loaded setlists always carry their songs."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._entries = SetlistSongRepository(session)
        self._performance_dates = PerformanceDateRepository(session)

    def _to_entity(self, row: SetlistTable, with_songs: bool = True) -> Setlist:
        setlist = Setlist.model_validate(row, from_attributes=True)
        if with_songs:
            setlist.songs = self._entries.list_for_setlist(row.id)
        return setlist

    def get(self, setlist_id: str, user_id: str, with_songs: bool = True) -> Setlist | None:
        row = self._session.get(SetlistTable, setlist_id)
        if row is None or row.user_id != user_id:
            return None
        return self._to_entity(row, with_songs)

    def search(
        self,
        user_id: str,
        search_term: str | None = None,
        is_template: bool | None = None,
        is_active: bool | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Setlist], int]:
        """Return one page of the owner's setlists, newest first, plus the total."""
        statement = select(SetlistTable).where(SetlistTable.user_id == user_id)

        if search_term and search_term.strip():
            pattern = f"%{search_term.strip().lower()}%"
            statement = statement.where(
                or_(
                    func.lower(SetlistTable.name).like(pattern),
                    func.lower(func.coalesce(SetlistTable.description, "")).like(pattern),
                    func.lower(func.coalesce(SetlistTable.venue, "")).like(pattern),
                )
            )
        if is_template is not None:
            statement = statement.where(SetlistTable.is_template == is_template)
        if is_active is not None:
            statement = statement.where(SetlistTable.is_active == is_active)

        total = self._session.exec(
            select(func.count()).select_from(statement.subquery())
        ).one()
        rows = self._session.exec(
            statement.order_by(SetlistTable.created_at.desc()).offset(offset).limit(limit)
        ).all()

        entries = self._entries.list_for_setlists([row.id for row in rows])
        setlists = []
        for row in rows:
            setlist = self._to_entity(row, with_songs=False)
            setlist.songs = entries[row.id]
            setlists.append(setlist)
        return setlists, total

    def create(self, setlist: Setlist) -> Setlist:
        row = SetlistTable(**setlist.model_dump(exclude={"songs"}))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def update(self, setlist: Setlist) -> Setlist | None:
        row = self._session.get(SetlistTable, setlist.id)
        if row is None or row.user_id != setlist.user_id:
            return None
        for field in _EDITABLE_FIELDS:
            setattr(row, field, getattr(setlist, field))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def delete(self, setlist_id: str, user_id: str) -> bool:
        row = self._session.get(SetlistTable, setlist_id)
        if row is None or row.user_id != user_id:
            return False
        self._entries.delete_for_setlist(setlist_id)
        self._performance_dates.delete_for_setlist(setlist_id)
        self._session.delete(row)
        self._session.flush()
        return True

    def count(self, user_id: str | None = None) -> int:
        statement = select(func.count()).select_from(SetlistTable)
        if user_id is not None:
            statement = statement.where(SetlistTable.user_id == user_id)
        return self._session.exec(statement).one()
