"""Schema creation and verification at startup."""

from pathlib import Path

from loguru import logger
from sqlalchemy.engine import make_url

from src.setlist_studio.core.services.database.db_session import DbSessionService
from src.setlist_studio.entities.service.song import SongRepository


class DatabaseInitializer:
    """Creates the schema and checks the database is usable.

    Failures are logged with connection details and re-raised; the caller
    decides whether they are fatal.
    """

    def __init__(self, db_service: DbSessionService) -> None:
        self._db = db_service

    def _sqlite_file(self) -> Path | None:
        config = self._db.config
        if not config.is_sqlite or config.is_in_memory:
            return None
        database = make_url(config.url).database
        return Path(database).resolve() if database else None

    def initialize(self) -> None:
        try:
            logger.info("Starting database initialization...")

            db_file = self._sqlite_file()
            if db_file is not None:
                db_file.parent.mkdir(parents=True, exist_ok=True)

            self._db.test_connection()
            logger.info("Database connection test: True")

            self._db.create_all()
            logger.info("Database schema ensured")

            with self._db.session_scope() as session:
                song_count = SongRepository(session).count()
            logger.info("Current song count in database: {}", song_count)

            logger.info("Database initialization completed successfully")
        except Exception as e:
            logger.error("Database initialization failed: {}", e)
            self._log_database_details()
            raise

    def _log_database_details(self) -> None:
        db_file = self._sqlite_file()
        if db_file is None:
            logger.error("Database URL: {}", make_url(self._db.config.url).render_as_string())
            return
        logger.error("Database file path: {}", db_file)
        logger.error("Database file exists: {}", db_file.exists())
        logger.error("Database directory exists: {}", db_file.parent.exists())
