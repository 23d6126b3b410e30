"""Sample library for local development."""

from datetime import timedelta

from loguru import logger
from sqlmodel import Session

from src.setlist_studio.entities.core._base import utc_now
from src.setlist_studio.entities.core.user import ApplicationUser, ApplicationUserRepository
from src.setlist_studio.entities.service.setlist import Setlist, SetlistRepository
from src.setlist_studio.entities.service.setlist_song import SetlistSong, SetlistSongRepository
from src.setlist_studio.entities.service.song import Song, SongRepository

DEMO_EMAIL = "demo@setliststudio.com"

# title, artist, album, genre, bpm, key, duration, tags, difficulty
SAMPLE_SONGS = [
    ("Bohemian Rhapsody", "Queen", "A Night at the Opera", "Rock", 72, "Bb", 355, "epic, opera, classic rock", 5),
    ("Billie Jean", "Michael Jackson", "Thriller", "Pop", 117, "F#m", 294, "dance, pop, 80s", 3),
    ("Sweet Child O' Mine", "Guns N' Roses", "Appetite for Destruction", "Rock", 125, "D", 356, "guitar solo, rock, 80s", 4),
    ("Take Five", "Dave Brubeck", "Time Out", "Jazz", 176, "Bb", 324, "instrumental, jazz, 5/4 time", 4),
    ("The Thrill Is Gone", "B.B. King", None, "Blues", 98, "Bm", 311, "blues, guitar, emotional", 3),
    ("Hotel California", "Eagles", "Hotel California", "Rock", 75, "Bm", 391, "classic rock, guitar", 4),
    ("Summertime", "George Gershwin", None, "Jazz", 85, "Am", 195, "jazz standard, ballad", 2),
    ("Uptown Funk", "Mark Ronson ft. Bruno Mars", None, "Funk", 115, "Dm", 269, "funk, dance, modern", 3),
]

WEDDING_SET = [
    ("Billie Jean", "High energy opener"),
    ("Uptown Funk", "Get everyone dancing"),
    ("Hotel California", "Crowd sing-along"),
    ("Sweet Child O' Mine", "Guitar showcase"),
]

JAZZ_TEMPLATE = [
    ("Summertime", "Gentle opener"),
    ("Take Five", "Feature odd time signature"),
    ("The Thrill Is Gone", "Blues influence"),
]


def seed_development_data(session: Session) -> bool:
    """Populate an empty library with a demo user, songs and two setlists.

    Returns False when songs already exist.
    """
    songs_repo = SongRepository(session)
    if songs_repo.count() > 0:
        return False

    logger.info("Seeding development data...")
    users = ApplicationUserRepository(session)
    demo_user = users.get_by_email(DEMO_EMAIL) or users.create(
        ApplicationUser(display_name="Demo User", email=DEMO_EMAIL, provider="Demo")
    )

    songs_by_title = {}
    for title, artist, album, genre, bpm, key, duration, tags, difficulty in SAMPLE_SONGS:
        song = songs_repo.create(
            Song(
                title=title,
                artist=artist,
                album=album,
                genre=genre,
                bpm=bpm,
                musical_key=key,
                duration_seconds=duration,
                tags=tags,
                difficulty_rating=difficulty,
                user_id=demo_user.id,
            )
        )
        songs_by_title[title] = song

    setlists = SetlistRepository(session)
    wedding = setlists.create(
        Setlist(
            name="Wedding Reception Set",
            description="Perfect mix for wedding celebration",
            venue="Grand Ballroom",
            performance_date=utc_now() + timedelta(days=30),
            expected_duration_minutes=120,
            is_active=True,
            performance_notes="Keep energy up, take requests for slow dances",
            user_id=demo_user.id,
        )
    )
    jazz = setlists.create(
        Setlist(
            name="Jazz Evening Template",
            description="Sophisticated jazz standards for intimate venues",
            expected_duration_minutes=90,
            is_template=True,
            is_active=False,
            performance_notes="Encourage improvisation, adjust tempo based on audience",
            user_id=demo_user.id,
        )
    )

    entries = SetlistSongRepository(session)
    for setlist, plan in ((wedding, WEDDING_SET), (jazz, JAZZ_TEMPLATE)):
        for position, (title, notes) in enumerate(plan, start=1):
            entries.create(
                SetlistSong(
                    setlist_id=setlist.id,
                    song_id=songs_by_title[title].id,
                    position=position,
                    performance_notes=notes,
                )
            )

    logger.info("Development data seeded successfully")
    return True
