"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.setlist_studio.runtime.config.config_data import DatabaseConfig


class DbSessionService:
    def __init__(self, db_config: DatabaseConfig, environment: str = "Production"):
        """Create the shared engine for ``db_config``."""
        self._config = db_config
        engine_kwargs = {
            "echo": db_config.echo,
            "connect_args": self._get_connect_args(db_config, environment),
        }

        if db_config.is_in_memory:
            # One connection shared by every session, or each would see an empty database
            engine_kwargs["poolclass"] = StaticPool
        elif not db_config.is_sqlite:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,
                }
            )

        logger.info(
            "Configuring database engine for environment {} ({})",
            environment,
            "sqlite" if db_config.is_sqlite else "server",
        )
        self._engine = create_engine(db_config.connection_string, **engine_kwargs)

    @staticmethod
    def _get_connect_args(db_config: DatabaseConfig, environment: str) -> dict:
        if not db_config.is_sqlite:
            return {"connect_timeout": 30}

        if environment == "Production" and not db_config.is_in_memory:
            logger.warning("SQLite in Production: consider a server database")
        return {"check_same_thread": False, "timeout": 20}

    @property
    def engine(self):
        return self._engine

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False, autoflush=True)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error("Database transaction failed: {}: {}", type(e).__name__, e)
            raise
        finally:
            db.close()

    def create_all(self) -> None:
        """Create every table registered on the SQLModel metadata."""
        # Table classes register themselves on import
        import src.setlist_studio.entities  # noqa: F401

        SQLModel.metadata.create_all(self._engine)

    def test_connection(self) -> None:
        """Run ``SELECT 1``; errors propagate."""
        with self._engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def health_check(self) -> bool:
        try:
            self.test_connection()
            return True
        except SQLAlchemyError as e:
            logger.error("Database health check failed: {}: {}", type(e).__name__, e)
            return False

    def dispose(self) -> None:
        self._engine.dispose()
