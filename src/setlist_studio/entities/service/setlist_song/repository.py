"""SetlistSong repository."""

from sqlmodel import Session, col, func, select

from src.setlist_studio.entities.service.song.entity import Song
from src.setlist_studio.entities.service.song.table import SongTable

from .entity import SetlistSong
from .table import SetlistSongTable

_OVERRIDE_FIELDS = (
    "position",
    "transition_notes",
    "performance_notes",
    "is_encore",
    "is_optional",
    "custom_bpm",
    "custom_key",
)


class SetlistSongRepository:
    """Data-access layer for setlist entries.

    Ownership is checked by the callers through the parent setlist.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_entity(row: SetlistSongTable, song_row: SongTable | None = None) -> SetlistSong:
        entry = SetlistSong.model_validate(row, from_attributes=True)
        if song_row is not None:
            entry.song = Song.model_validate(song_row, from_attributes=True)
        return entry

    def _with_songs(self, statement) -> list[SetlistSong]:
        return [self._to_entity(entry, song) for entry, song in self._session.exec(statement).all()]

    def list_for_setlist(self, setlist_id: str) -> list[SetlistSong]:
        """Entries of one setlist in position order, each with its song loaded."""
        statement = (
            select(SetlistSongTable, SongTable)
            .join(SongTable, SongTable.id == SetlistSongTable.song_id)
            .where(SetlistSongTable.setlist_id == setlist_id)
            .order_by(SetlistSongTable.position)
        )
        return self._with_songs(statement)

    def list_for_setlists(self, setlist_ids: list[str]) -> dict[str, list[SetlistSong]]:
        grouped: dict[str, list[SetlistSong]] = {setlist_id: [] for setlist_id in setlist_ids}
        if not setlist_ids:
            return grouped
        statement = (
            select(SetlistSongTable, SongTable)
            .join(SongTable, SongTable.id == SetlistSongTable.song_id)
            .where(col(SetlistSongTable.setlist_id).in_(setlist_ids))
            .order_by(SetlistSongTable.setlist_id, SetlistSongTable.position)
        )
        for entry in self._with_songs(statement):
            grouped[entry.setlist_id].append(entry)
        return grouped

    def get(self, setlist_song_id: str) -> SetlistSong | None:
        statement = (
            select(SetlistSongTable, SongTable)
            .join(SongTable, SongTable.id == SetlistSongTable.song_id)
            .where(SetlistSongTable.id == setlist_song_id)
        )
        result = self._session.exec(statement).first()
        if result is None:
            return None
        return self._to_entity(*result)

    def find(self, setlist_id: str, song_id: str) -> SetlistSong | None:
        statement = select(SetlistSongTable).where(
            SetlistSongTable.setlist_id == setlist_id, SetlistSongTable.song_id == song_id
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row else None

    def max_position(self, setlist_id: str) -> int:
        """Highest position in the setlist, 0 when it is empty."""
        statement = select(func.max(SetlistSongTable.position)).where(
            SetlistSongTable.setlist_id == setlist_id
        )
        return self._session.exec(statement).one() or 0

    def shift_positions(self, setlist_id: str, from_position: int, delta: int) -> None:
        """Move every entry at or after ``from_position`` by ``delta``."""
        statement = select(SetlistSongTable).where(
            SetlistSongTable.setlist_id == setlist_id,
            SetlistSongTable.position >= from_position,
        )
        for row in self._session.exec(statement).all():
            row.position += delta
            self._session.add(row)
        self._session.flush()

    def set_positions(self, setlist_id: str, positions: dict[str, int]) -> None:
        """Apply ``{setlist_song_id: position}`` to entries of the setlist."""
        statement = select(SetlistSongTable).where(SetlistSongTable.setlist_id == setlist_id)
        for row in self._session.exec(statement).all():
            if row.id in positions:
                row.position = positions[row.id]
                self._session.add(row)
        self._session.flush()

    def create(self, entry: SetlistSong) -> SetlistSong:
        row = SetlistSongTable(**entry.model_dump(exclude={"song"}))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row, self._session.get(SongTable, row.song_id))

    def update(self, entry: SetlistSong) -> SetlistSong | None:
        row = self._session.get(SetlistSongTable, entry.id)
        if row is None:
            return None
        for field in _OVERRIDE_FIELDS:
            setattr(row, field, getattr(entry, field))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row, self._session.get(SongTable, row.song_id))

    def delete(self, setlist_song_id: str) -> bool:
        row = self._session.get(SetlistSongTable, setlist_song_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def delete_for_setlist(self, setlist_id: str) -> int:
        rows = self._session.exec(
            select(SetlistSongTable).where(SetlistSongTable.setlist_id == setlist_id)
        ).all()
        for row in rows:
            self._session.delete(row)
        self._session.flush()
        return len(rows)

    def delete_for_song(self, song_id: str) -> list[str]:
        """Remove a song from every setlist. Returns the affected setlist ids."""
        rows = self._session.exec(
            select(SetlistSongTable).where(SetlistSongTable.song_id == song_id)
        ).all()
        affected = sorted({row.setlist_id for row in rows})
        for row in rows:
            self._session.delete(row)
        self._session.flush()
        return affected
