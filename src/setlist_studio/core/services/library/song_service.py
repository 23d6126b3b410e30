"""Song library operations, scoped to one request."""

from loguru import logger
from sqlmodel import Session

from src.setlist_studio.core.validation import (
    check_malicious_content,
    check_max_length,
    check_range,
    contains_path_traversal,
)
from src.setlist_studio.entities.service.setlist_song import SetlistSongRepository
from src.setlist_studio.entities.service.song import Song, SongRepository


def validation_failure(errors: list[str]) -> ValueError:
    return ValueError("Validation failed: " + ", ".join(errors))


class SongService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._songs = SongRepository(session)
        self._entries = SetlistSongRepository(session)

    def get_songs(
        self,
        user_id: str,
        search_term: str | None = None,
        genre: str | None = None,
        tags: str | None = None,
        page_number: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Song], int]:
        """Return ``(songs, total_count)`` for one page of the user's library."""
        page_number = max(page_number, 1)
        songs, total = self._songs.search(
            user_id,
            search_term=search_term,
            genre=genre,
            tags=tags,
            offset=(page_number - 1) * page_size,
            limit=page_size,
        )
        logger.debug("Retrieved {} songs for user {} (page {})", len(songs), user_id, page_number)
        return songs, total

    def get_song(self, song_id: str, user_id: str) -> Song | None:
        return self._songs.get(song_id, user_id)

    def create_song(self, song: Song) -> Song:
        """Validate and persist a new song.

        Raises:
            ValueError: ``Validation failed: ...`` listing every problem.
        """
        errors = self.validate_song(song)
        if errors:
            raise validation_failure(errors)

        created = self._songs.create(song)
        self._session.commit()
        logger.info("Created song {} for user {}", created.id, created.user_id)
        return created

    def update_song(self, song: Song, user_id: str) -> Song | None:
        """Replace the editable fields of an owned song. None when not found."""
        if self._songs.get(song.id, user_id) is None:
            logger.warning("Song {} not found or unauthorized for user {}", song.id, user_id)
            return None

        song.user_id = user_id
        errors = self.validate_song(song)
        if errors:
            raise validation_failure(errors)

        updated = self._songs.update(song)
        self._session.commit()
        logger.info("Updated song {} for user {}", song.id, user_id)
        return updated

    def delete_song(self, song_id: str, user_id: str) -> bool:
        if self._songs.get(song_id, user_id) is None:
            return False

        for setlist_id in self._entries.delete_for_song(song_id):
            remaining = self._entries.list_for_setlist(setlist_id)
            self._entries.set_positions(
                setlist_id, {entry.id: index for index, entry in enumerate(remaining, start=1)}
            )
        self._songs.delete(song_id, user_id)
        self._session.commit()
        logger.info("Deleted song {} for user {}", song_id, user_id)
        return True

    def get_genres(self, user_id: str) -> list[str]:
        return self._songs.distinct_values(user_id, "genre")

    def get_artists(self, user_id: str) -> list[str]:
        return self._songs.distinct_values(user_id, "artist")

    def get_tags(self, user_id: str) -> list[str]:
        """Individual tags across the library: split on commas, trimmed and sorted."""
        tags = set()
        for tag_string in self._songs.distinct_values(user_id, "tags"):
            tags.update(tag.strip() for tag in tag_string.split(",") if tag.strip())
        return sorted(tags)

    def validate_song(self, song: Song) -> list[str]:
        errors: list[str | None] = []

        for value, label in ((song.title, "Song title"), (song.artist, "Artist name")):
            if not value or not value.strip():
                errors.append(f"{label} is required")
            else:
                errors.append(check_max_length(value, 200, label))
        errors.append(check_malicious_content(song.title, "Song title"))
        errors.append(check_malicious_content(song.artist, "Artist name"))

        errors.append(check_max_length(song.album, 200, "Album name"))
        errors.append(check_max_length(song.genre, 50, "Genre"))
        errors.append(check_max_length(song.musical_key, 10, "Musical key"))
        errors.append(check_max_length(song.notes, 2000, "Notes"))
        errors.append(check_max_length(song.tags, 500, "Tags"))
        if contains_path_traversal(song.album):
            errors.append("Album name contains path traversal patterns")
        errors.append(check_malicious_content(song.notes, "Notes"))

        errors.append(check_range(song.bpm, 40, 250, "BPM must be between 40 and 250"))
        errors.append(
            check_range(
                song.duration_seconds, 1, 3600, "Duration must be between 1 second and 1 hour"
            )
        )
        errors.append(
            check_range(
                song.difficulty_rating, 1, 5, "Difficulty rating must be between 1 and 5"
            )
        )

        if not song.user_id or not song.user_id.strip():
            errors.append("User ID is required")

        return [error for error in errors if error]
