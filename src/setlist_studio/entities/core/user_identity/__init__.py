"""User identity entity module.

- UserIdentity: domain entity linking an external login to an internal user
- UserIdentityTable: database persistence model
- UserIdentityRepository: data access layer
"""

from .entity import UserIdentity
from .repository import UserIdentityRepository
from .table import UserIdentityTable

__all__ = ["UserIdentity", "UserIdentityTable", "UserIdentityRepository"]
