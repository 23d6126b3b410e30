"""Entity package: SetlistSong."""

from .entity import SetlistSong
from .repository import SetlistSongRepository
from .table import SetlistSongTable

__all__ = ["SetlistSong", "SetlistSongRepository", "SetlistSongTable"]
