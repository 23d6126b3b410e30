"""Entity package: Setlist."""

from .entity import Setlist
from .repository import SetlistRepository
from .table import SetlistTable

__all__ = ["Setlist", "SetlistRepository", "SetlistTable"]
