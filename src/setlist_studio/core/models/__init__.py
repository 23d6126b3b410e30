"""Core models."""

from .duration import SetlistDuration, SetlistItemDuration
from .pagination import PaginatedResult
from .session import AuthSession, UserSession

__all__ = ["AuthSession", "PaginatedResult", "SetlistDuration", "SetlistItemDuration", "UserSession"]
