"""Entity package: ApplicationUser."""

from .entity import ApplicationUser
from .repository import ApplicationUserRepository
from .table import ApplicationUserTable

__all__ = ["ApplicationUser", "ApplicationUserRepository", "ApplicationUserTable"]
