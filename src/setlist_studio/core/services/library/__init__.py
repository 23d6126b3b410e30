"""Library services: songs, setlists, their bookings, timing and export."""

from .performance_date_service import PerformanceDateService
from .setlist_duration_service import SetlistDurationService
from .setlist_export_service import SetlistExportService
from .setlist_service import SetlistService
from .song_service import SongService

__all__ = [
    "PerformanceDateService",
    "SetlistDurationService",
    "SetlistExportService",
    "SetlistService",
    "SongService",
]
