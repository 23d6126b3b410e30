"""Running-time estimate for a setlist: song lengths plus predicted changeovers.

A changeover starts from a base time and grows with the tempo gap between
neighbouring songs and with a key change that is not a close relative. It
never exceeds the configured maximum.
"""

from loguru import logger
from sqlmodel import Session

from src.setlist_studio.core.models import SetlistDuration, SetlistItemDuration
from src.setlist_studio.entities.service.setlist import SetlistRepository
from src.setlist_studio.entities.service.setlist_song import SetlistSong
from src.setlist_studio.runtime.config.config_data import SetlistTimingConfig


def normalize_key(key: str | None) -> str:
    if not key or not key.strip():
        return ""
    return key.strip().upper().replace("♯", "#").replace("♭", "B")


# Major keys and their relative minors
RELATIVE_KEYS = frozenset(
    (normalize_key(major), normalize_key(minor))
    for major, minor in (
        ("C", "Am"),
        ("G", "Em"),
        ("D", "Bm"),
        ("A", "F#m"),
        ("E", "C#m"),
        ("B", "G#m"),
        ("F#", "D#m"),
        ("C#", "A#m"),
        ("F", "Dm"),
        ("Bb", "Gm"),
        ("Eb", "Cm"),
        ("Ab", "Fm"),
        ("Db", "Bbm"),
        ("Gb", "Ebm"),
        ("Cb", "Abm"),
    )
)


def keys_compatible(first: str, second: str) -> bool:
    """Same key, same root letter, or a relative major/minor pair (normalised keys)."""
    if first == second:
        return True
    if first and second and first[0] == second[0]:
        return True
    return (first, second) in RELATIVE_KEYS or (second, first) in RELATIVE_KEYS


def predict_transition(
    current: SetlistSong, following: SetlistSong, timing: SetlistTimingConfig
) -> float:
    """Seconds between the end of ``current`` and the start of ``following``."""
    seconds = timing.base_transition_seconds

    current_bpm, following_bpm = current.effective_bpm, following.effective_bpm
    if current_bpm is not None and following_bpm is not None:
        seconds += abs(current_bpm - following_bpm) * timing.bpm_difference_penalty_multiplier

    current_key = normalize_key(current.effective_key)
    following_key = normalize_key(following.effective_key)
    if current_key and following_key and not keys_compatible(current_key, following_key):
        seconds += timing.key_mismatch_penalty_seconds

    return min(seconds, timing.max_transition_seconds)


class SetlistDurationService:
    def __init__(self, session: Session, timing: SetlistTimingConfig) -> None:
        self._setlists = SetlistRepository(session)
        self._timing = timing

    def _resolve_duration(self, entry: SetlistSong) -> float:
        if entry.song is not None and entry.song.duration_seconds is not None:
            return float(entry.song.duration_seconds)
        return float(self._timing.default_song_duration_seconds)

    def calculate_duration(self, setlist_id: str, user_id: str) -> SetlistDuration | None:
        """Estimate the running time of an owned setlist. None when it is not owned."""
        setlist = self._setlists.get(setlist_id, user_id)
        if setlist is None:
            logger.warning("Setlist {} not found or unauthorized for user {}", setlist_id, user_id)
            return None

        entries = sorted(setlist.songs, key=lambda e: e.position)
        if not entries:
            logger.info("Setlist {} has no songs to time", setlist_id)
            return SetlistDuration()

        items = []
        for index, entry in enumerate(entries):
            transition = 0.0
            if index < len(entries) - 1:
                transition = predict_transition(entry, entries[index + 1], self._timing)
            items.append(
                SetlistItemDuration(
                    setlist_song_id=entry.id,
                    song_id=entry.song_id,
                    song_title=entry.song.title if entry.song else "",
                    position=entry.position,
                    resolved_duration_seconds=self._resolve_duration(entry),
                    predicted_transition_seconds_to_next=transition,
                )
            )

        song_seconds = sum(item.resolved_duration_seconds for item in items)
        transition_seconds = sum(item.predicted_transition_seconds_to_next for item in items)
        logger.info(
            "Timed setlist {} for user {}: {} songs, {}s of music, {}s of transitions",
            setlist_id,
            user_id,
            len(items),
            song_seconds,
            transition_seconds,
        )
        return SetlistDuration(
            total_song_seconds=song_seconds,
            total_transition_seconds=transition_seconds,
            combined_total_seconds=song_seconds + transition_seconds,
            items=items,
        )
