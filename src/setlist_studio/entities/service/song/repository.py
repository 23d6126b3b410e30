"""Song repository."""

from sqlmodel import Session, col, func, or_, select

from .entity import Song
from .table import SongTable

_EDITABLE_FIELDS = (
    "title",
    "artist",
    "album",
    "genre",
    "bpm",
    "musical_key",
    "duration_seconds",
    "notes",
    "tags",
    "difficulty_rating",
)


class SongRepository:
    """Data-access layer for songs. Every query is scoped to one owner."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, row: SongTable) -> Song:
        return Song.model_validate(row, from_attributes=True)

    def get(self, song_id: str, user_id: str) -> Song | None:
        row = self._session.get(SongTable, song_id)
        if row is None or row.user_id != user_id:
            return None
        return self._to_entity(row)

    def get_many(self, song_ids: list[str], user_id: str) -> dict[str, Song]:
        if not song_ids:
            return {}
        statement = select(SongTable).where(
            col(SongTable.id).in_(song_ids), SongTable.user_id == user_id
        )
        return {row.id: self._to_entity(row) for row in self._session.exec(statement).all()}

    def search(
        self,
        user_id: str,
        search_term: str | None = None,
        genre: str | None = None,
        tags: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Song], int]:
        """Return one page of the owner's songs ordered by artist then title, plus the total."""
        statement = select(SongTable).where(SongTable.user_id == user_id)

        if search_term and search_term.strip():
            pattern = f"%{search_term.strip().lower()}%"
            statement = statement.where(
                or_(
                    func.lower(SongTable.title).like(pattern),
                    func.lower(SongTable.artist).like(pattern),
                    func.lower(func.coalesce(SongTable.album, "")).like(pattern),
                )
            )
        if genre and genre.strip():
            statement = statement.where(SongTable.genre == genre)
        if tags and tags.strip():
            statement = statement.where(
                func.coalesce(SongTable.tags, "").contains(tags.strip())
            )

        total = self._session.exec(
            select(func.count()).select_from(statement.subquery())
        ).one()
        page = self._session.exec(
            statement.order_by(SongTable.artist, SongTable.title).offset(offset).limit(limit)
        ).all()
        return [self._to_entity(row) for row in page], total

    def distinct_values(self, user_id: str, field: str) -> list[str]:
        """Sorted distinct non-empty values of a text column for one owner."""
        column = getattr(SongTable, field)
        statement = (
            select(column)
            .where(SongTable.user_id == user_id, column.is_not(None), column != "")
            .distinct()
            .order_by(column)
        )
        return list(self._session.exec(statement).all())

    def create(self, song: Song) -> Song:
        row = SongTable(**song.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def update(self, song: Song) -> Song | None:
        """Copy editable fields onto the stored row. Returns None when the owner doesn't match."""
        row = self._session.get(SongTable, song.id)
        if row is None or row.user_id != song.user_id:
            return None
        for field in _EDITABLE_FIELDS:
            setattr(row, field, getattr(song, field))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def delete(self, song_id: str, user_id: str) -> bool:
        row = self._session.get(SongTable, song_id)
        if row is None or row.user_id != user_id:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def count(self, user_id: str | None = None) -> int:
        statement = select(func.count()).select_from(SongTable)
        if user_id is not None:
            statement = statement.where(SongTable.user_id == user_id)
        return self._session.exec(statement).one()
