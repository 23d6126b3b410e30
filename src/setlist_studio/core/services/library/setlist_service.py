"""Setlist operations, scoped to one request."""

from datetime import datetime

from loguru import logger
from sqlmodel import Session

from src.setlist_studio.core.services.library.song_service import validation_failure
from src.setlist_studio.core.validation import check_max_length, check_range
from src.setlist_studio.entities.service.setlist import Setlist, SetlistRepository
from src.setlist_studio.entities.service.setlist_song import SetlistSong, SetlistSongRepository
from src.setlist_studio.entities.service.song import SongRepository


class SetlistService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._setlists = SetlistRepository(session)
        self._entries = SetlistSongRepository(session)
        self._songs = SongRepository(session)

    def get_setlists(
        self,
        user_id: str,
        search_term: str | None = None,
        is_template: bool | None = None,
        is_active: bool | None = None,
        page_number: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Setlist], int]:
        """Return ``(setlists, total_count)``, newest first."""
        page_number = max(page_number, 1)
        return self._setlists.search(
            user_id,
            search_term=search_term,
            is_template=is_template,
            is_active=is_active,
            offset=(page_number - 1) * page_size,
            limit=page_size,
        )

    def get_setlist(self, setlist_id: str, user_id: str) -> Setlist | None:
        return self._setlists.get(setlist_id, user_id)

    def create_setlist(self, setlist: Setlist) -> Setlist:
        errors = self.validate_setlist(setlist)
        if errors:
            raise validation_failure(errors)

        created = self._setlists.create(setlist)
        self._session.commit()
        logger.info("Created setlist {} for user {}", created.id, created.user_id)
        return created

    def update_setlist(self, setlist: Setlist, user_id: str) -> Setlist | None:
        if self._setlists.get(setlist.id, user_id, with_songs=False) is None:
            logger.warning("Setlist {} not found or unauthorized for user {}", setlist.id, user_id)
            return None

        setlist.user_id = user_id
        errors = self.validate_setlist(setlist)
        if errors:
            raise validation_failure(errors)

        updated = self._setlists.update(setlist)
        self._session.commit()
        logger.info("Updated setlist {} for user {}", setlist.id, user_id)
        return updated

    def delete_setlist(self, setlist_id: str, user_id: str) -> bool:
        deleted = self._setlists.delete(setlist_id, user_id)
        if deleted:
            self._session.commit()
            logger.info("Deleted setlist {} for user {}", setlist_id, user_id)
        return deleted

    def add_song(
        self, setlist_id: str, song_id: str, user_id: str, position: int | None = None
    ) -> SetlistSong | None:
        """Place an owned song in an owned setlist.

        Without a position the song is appended; with one, later entries move
        down to make room. Returns None when either side is not owned or the
        song is already in the setlist.
        """
        if self._setlists.get(setlist_id, user_id, with_songs=False) is None:
            logger.warning("Setlist {} not found or unauthorized for user {}", setlist_id, user_id)
            return None
        if self._songs.get(song_id, user_id) is None:
            logger.warning("Song {} not found or unauthorized for user {}", song_id, user_id)
            return None
        if self._entries.find(setlist_id, song_id) is not None:
            logger.warning("Song {} already in setlist {}", song_id, setlist_id)
            return None

        if position is None:
            target = self._entries.max_position(setlist_id) + 1
        else:
            target = max(position, 1)
        candidate = SetlistSong(setlist_id=setlist_id, song_id=song_id, position=target)
        errors = self.validate_setlist_song(candidate)
        if errors:
            raise validation_failure(errors)

        if position is not None:
            self._entries.shift_positions(setlist_id, target, 1)
        entry = self._entries.create(candidate)
        self._session.commit()
        logger.info("Added song {} to setlist {} at position {}", song_id, setlist_id, target)
        return entry

    def remove_song(self, setlist_id: str, song_id: str, user_id: str) -> bool:
        if self._setlists.get(setlist_id, user_id, with_songs=False) is None:
            return False
        entry = self._entries.find(setlist_id, song_id)
        if entry is None:
            logger.warning("Song {} is not in setlist {}", song_id, setlist_id)
            return False

        self._entries.delete(entry.id)
        self._entries.shift_positions(setlist_id, entry.position + 1, -1)
        self._session.commit()
        logger.info("Removed song {} from setlist {}", song_id, setlist_id)
        return True

    def reorder_songs(self, setlist_id: str, song_ordering: list[str], user_id: str) -> bool:
        """Give the listed songs positions 1..n in order."""
        if self._setlists.get(setlist_id, user_id, with_songs=False) is None:
            return False

        entries = self._entries.list_for_setlist(setlist_id)
        if not entries:
            logger.warning("Setlist {} has no songs to reorder", setlist_id)
            return False

        by_song = {entry.song_id: entry for entry in entries}
        if any(song_id not in by_song for song_id in song_ordering):
            logger.warning("Invalid song ordering for setlist {}: some songs not in setlist", setlist_id)
            return False

        self._entries.set_positions(
            setlist_id,
            {by_song[song_id].id: index for index, song_id in enumerate(song_ordering, start=1)},
        )
        self._session.commit()
        logger.info("Reordered songs in setlist {}", setlist_id)
        return True

    def update_setlist_song(
        self,
        setlist_song_id: str,
        user_id: str,
        performance_notes: str | None = None,
        transition_notes: str | None = None,
        custom_bpm: int | None = None,
        custom_key: str | None = None,
        is_encore: bool | None = None,
        is_optional: bool | None = None,
    ) -> SetlistSong | None:
        """Apply the given per-performance overrides; None arguments are left untouched."""
        entry = self._entries.get(setlist_song_id)
        if entry is None or self._setlists.get(entry.setlist_id, user_id, with_songs=False) is None:
            logger.warning("SetlistSong {} not found or unauthorized for user {}", setlist_song_id, user_id)
            return None

        changes = {
            "performance_notes": performance_notes,
            "transition_notes": transition_notes,
            "custom_bpm": custom_bpm,
            "custom_key": custom_key,
            "is_encore": is_encore,
            "is_optional": is_optional,
        }
        for field, value in changes.items():
            if value is not None:
                setattr(entry, field, value)
        errors = self.validate_setlist_song(entry)
        if errors:
            raise validation_failure(errors)

        updated = self._entries.update(entry)
        self._session.commit()
        return updated

    def copy_setlist(self, source_setlist_id: str, new_name: str, user_id: str) -> Setlist | None:
        """Duplicate a setlist and its songs under a new name.

        The copy drops venue and date and is neither a template nor active.
        """
        if not new_name or not new_name.strip():
            raise ValueError("Setlist name cannot be null or empty")

        source = self._setlists.get(source_setlist_id, user_id)
        if source is None:
            logger.warning("Source setlist {} not found or unauthorized for user {}", source_setlist_id, user_id)
            return None

        copy = self._setlists.create(
            Setlist(
                name=new_name,
                description=source.description,
                expected_duration_minutes=source.expected_duration_minutes,
                is_template=False,
                is_active=False,
                performance_notes=source.performance_notes,
                user_id=user_id,
            )
        )
        self._copy_entries(source, copy.id)
        self._session.commit()
        logger.info("Copied setlist {} to {}", source_setlist_id, copy.id)
        return self._setlists.get(copy.id, user_id)

    def create_from_template(
        self,
        template_id: str,
        user_id: str,
        name: str,
        performance_date: datetime | None = None,
        venue: str | None = None,
        performance_notes: str | None = None,
    ) -> Setlist | None:
        """Start an active setlist from a template. None when the template is not found."""
        if not name or not name.strip():
            raise ValueError("Setlist name cannot be null or empty")
        if not user_id or not user_id.strip():
            raise ValueError("User ID cannot be null or empty")

        template = self._setlists.get(template_id, user_id)
        if template is None or not template.is_template:
            logger.warning("Template {} not found, not a template, or unauthorized for user {}", template_id, user_id)
            return None

        if len(name) > 200:
            raise ValueError("Setlist name cannot exceed 200 characters")

        setlist = Setlist(
            name=name,
            description=template.description,
            venue=venue,
            performance_date=performance_date,
            expected_duration_minutes=template.expected_duration_minutes,
            is_template=False,
            is_active=True,
            performance_notes=performance_notes if performance_notes is not None else template.performance_notes,
            user_id=user_id,
        )
        errors = self.validate_setlist(setlist)
        if errors:
            raise validation_failure(errors)

        created = self._setlists.create(setlist)
        self._copy_entries(template, created.id)
        self._session.commit()
        logger.info("Created setlist {} from template {}", created.id, template_id)
        return self._setlists.get(created.id, user_id)

    def _copy_entries(self, source: Setlist, target_setlist_id: str) -> None:
        for entry in sorted(source.songs, key=lambda e: e.position):
            self._entries.create(
                SetlistSong(
                    setlist_id=target_setlist_id,
                    song_id=entry.song_id,
                    position=entry.position,
                    transition_notes=entry.transition_notes,
                    performance_notes=entry.performance_notes,
                    is_encore=entry.is_encore,
                    is_optional=entry.is_optional,
                    custom_bpm=entry.custom_bpm,
                    custom_key=entry.custom_key,
                )
            )

    def validate_setlist(self, setlist: Setlist) -> list[str]:
        errors: list[str | None] = []
        if not setlist.name or not setlist.name.strip():
            errors.append("Setlist name is required")
        else:
            errors.append(check_max_length(setlist.name, 200, "Setlist name"))
        errors.append(check_max_length(setlist.description, 1000, "Description"))
        errors.append(check_max_length(setlist.venue, 200, "Venue"))
        if setlist.expected_duration_minutes is not None and setlist.expected_duration_minutes < 1:
            errors.append("Expected duration must be at least 1 minute")
        errors.append(check_max_length(setlist.performance_notes, 2000, "Performance notes"))
        if not setlist.user_id or not setlist.user_id.strip():
            errors.append("User ID is required")
        return [error for error in errors if error]

    def validate_setlist_song(self, entry: SetlistSong) -> list[str]:
        errors: list[str | None] = [
            check_range(entry.position, 1, 1000, "Position must be between 1 and 1000"),
            check_range(entry.custom_bpm, 40, 250, "Custom BPM must be between 40 and 250"),
            check_max_length(entry.custom_key, 10, "Custom key"),
            check_max_length(entry.transition_notes, 500, "Transition notes"),
            check_max_length(entry.performance_notes, 1000, "Performance notes"),
        ]
        return [error for error in errors if error]
