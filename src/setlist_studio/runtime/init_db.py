"""Database initialization script."""

from src.setlist_studio.api.utils.app_startup import configure_logging
from src.setlist_studio.core.services import DatabaseInitializer, DbSessionService
from src.setlist_studio.runtime.context import get_config


def init_db() -> None:
    """Create all database tables."""
    config = get_config()
    db_service = DbSessionService(config.database, config.app.environment)
    try:
        DatabaseInitializer(db_service).initialize()
    finally:
        db_service.dispose()


if __name__ == "__main__":
    configure_logging()
    init_db()
