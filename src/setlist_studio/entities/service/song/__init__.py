"""Entity package: Song."""

from .entity import Song
from .repository import SongRepository
from .table import SongTable

__all__ = ["Song", "SongRepository", "SongTable"]
