"""Entities grouped by business concept.

Each package holds the domain model (``entity.py``), its persistence model
(``table.py``) and the data-access layer (``repository.py``).
"""

from .core.user import ApplicationUser, ApplicationUserRepository, ApplicationUserTable
from .core.user_identity import UserIdentity, UserIdentityRepository, UserIdentityTable
from .service.performance_date import (
    PerformanceDate,
    PerformanceDateRepository,
    PerformanceDateTable,
)
from .service.setlist import Setlist, SetlistRepository, SetlistTable
from .service.setlist_song import SetlistSong, SetlistSongRepository, SetlistSongTable
from .service.song import Song, SongRepository, SongTable

__all__ = [
    "ApplicationUser",
    "ApplicationUserRepository",
    "ApplicationUserTable",
    "UserIdentity",
    "UserIdentityRepository",
    "UserIdentityTable",
    "Song",
    "SongRepository",
    "SongTable",
    "Setlist",
    "SetlistRepository",
    "SetlistTable",
    "SetlistSong",
    "SetlistSongRepository",
    "SetlistSongTable",
    "PerformanceDate",
    "PerformanceDateRepository",
    "PerformanceDateTable",
]
