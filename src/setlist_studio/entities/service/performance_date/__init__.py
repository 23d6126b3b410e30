"""Entity package: PerformanceDate."""

from .entity import PerformanceDate
from .repository import PerformanceDateRepository
from .table import PerformanceDateTable

__all__ = ["PerformanceDate", "PerformanceDateRepository", "PerformanceDateTable"]
