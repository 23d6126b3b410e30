"""CSV export of setlists for band members and venue coordinators."""

from dataclasses import dataclass
from datetime import UTC, datetime

from loguru import logger
from sqlmodel import Session

from src.setlist_studio.entities.service.setlist import Setlist, SetlistRepository

CSV_COLUMNS = (
    "Position,Title,Artist,Key,BPM,Duration (sec),Genre,Difficulty,"
    "Notes,Transition Notes,Encore,Optional"
)

_INVALID_FILENAME_CHARS = set('<>:"/\\|?*') | {chr(code) for code in range(32)}


@dataclass(frozen=True)
class CsvExport:
    content: bytes
    filename: str


def escape_csv_value(value: str | None) -> str:
    """Quote values containing a comma, quote or newline; double inner quotes."""
    if not value:
        return ""
    if any(char in value for char in (",", '"', "\n", "\r")):
        return '"' + value.replace('"', '""') + '"'
    return value


def sanitize_filename(name: str, max_length: int = 50) -> str:
    sanitized = "".join("_" if char in _INVALID_FILENAME_CHARS else char for char in name).strip()
    return sanitized[:max_length]


class SetlistExportService:
    def __init__(self, session: Session) -> None:
        self._setlists = SetlistRepository(session)

    def export_setlist(self, setlist_id: str, user_id: str) -> CsvExport | None:
        """UTF-8 CSV and its download name for an owned setlist, or None when it is not found."""
        if not user_id or not user_id.strip():
            raise ValueError("User ID is required")

        setlist = self._setlists.get(setlist_id, user_id)
        if setlist is None:
            logger.warning("Setlist {} not found or unauthorized for user {}", setlist_id, user_id)
            return None

        content = self.generate_csv_content(setlist)
        logger.info("Exported setlist {} to CSV for user {}", setlist_id, user_id)
        return CsvExport(content=content.encode("utf-8"), filename=self.generate_csv_filename(setlist))

    def export_setlist_to_csv(self, setlist_id: str, user_id: str) -> bytes | None:
        export = self.export_setlist(setlist_id, user_id)
        return export.content if export else None

    @staticmethod
    def generate_csv_content(setlist: Setlist, exported_at: datetime | None = None) -> str:
        exported_at = exported_at or datetime.now(UTC)
        lines = ["# Setlist Export", f"# Name: {escape_csv_value(setlist.name)}"]
        if setlist.description:
            lines.append(f"# Description: {escape_csv_value(setlist.description)}")
        if setlist.venue:
            lines.append(f"# Venue: {escape_csv_value(setlist.venue)}")
        if setlist.performance_date is not None:
            lines.append(f"# Performance Date: {setlist.performance_date:%Y-%m-%d %H:%M}")
        if setlist.expected_duration_minutes is not None:
            lines.append(f"# Expected Duration: {setlist.expected_duration_minutes} minutes")
        lines.append(f"# Total Songs: {setlist.song_count}")
        lines.append(f"# Exported: {exported_at:%Y-%m-%d %H:%M:%S} UTC")
        lines.append("")
        lines.append(CSV_COLUMNS)

        for entry in sorted(setlist.songs, key=lambda e: e.position):
            song = entry.song
            if song is None:
                continue
            bpm = entry.effective_bpm
            row = [
                str(entry.position),
                escape_csv_value(song.title),
                escape_csv_value(song.artist),
                escape_csv_value(entry.effective_key or ""),
                "" if bpm is None else str(bpm),
                "" if song.duration_seconds is None else str(song.duration_seconds),
                escape_csv_value(song.genre),
                "" if song.difficulty_rating is None else str(song.difficulty_rating),
                escape_csv_value(entry.performance_notes),
                escape_csv_value(entry.transition_notes),
                "Yes" if entry.is_encore else "No",
                "Yes" if entry.is_optional else "No",
            ]
            lines.append(",".join(row))

        return "\n".join(lines) + "\n"

    @staticmethod
    def generate_csv_filename(setlist: Setlist, today: datetime | None = None) -> str:
        """``setlist_<name>_<date>.csv``, dated by the performance or today."""
        date = setlist.performance_date or today or datetime.now(UTC)
        return f"setlist_{sanitize_filename(setlist.name)}_{date:%Y-%m-%d}.csv"
