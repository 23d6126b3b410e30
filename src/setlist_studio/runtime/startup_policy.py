"""Decides whether a database initialization failure stops startup.

Only a local ``Development`` host fails fast. Containers and every other
environment keep serving so health checks can report the problem.
"""

from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from src.setlist_studio.runtime.config.config_data import AppConfig


class InitErrorDecision(str, Enum):
    PROPAGATE = "propagate"
    SUPPRESS = "suppress"


class DatabaseInitializationError(RuntimeError):
    """Startup error wrapping the original database failure as ``__cause__``."""


def decide_init_error(environment: str, running_in_container: bool) -> InitErrorDecision:
    """Pure decision table; the environment name is compared case-sensitively."""
    if environment == "Development" and not running_in_container:
        return InitErrorDecision.PROPAGATE
    return InitErrorDecision.SUPPRESS


@dataclass(frozen=True)
class StartupPolicy:
    environment: str
    running_in_container: bool
    fail_fast_on_init_error: bool = field(init=False)

    def __post_init__(self) -> None:
        decision = decide_init_error(self.environment, self.running_in_container)
        object.__setattr__(self, "fail_fast_on_init_error", decision is InitErrorDecision.PROPAGATE)

    @classmethod
    def from_app_config(cls, app_config: AppConfig) -> "StartupPolicy":
        return cls(
            environment=app_config.environment,
            running_in_container=app_config.running_in_container,
        )


def handle_database_initialization_error(error: BaseException, policy: StartupPolicy) -> None:
    """Log ``error`` and either raise ``DatabaseInitializationError`` or return."""
    logger.opt(exception=error).error("Failed to initialize database")

    if policy.fail_fast_on_init_error:
        raise DatabaseInitializationError(
            "Database initialization failed in development environment"
        ) from error

    logger.warning(
        "Continuing without database initialization - app will have limited "
        "functionality but will respond to health checks"
    )
