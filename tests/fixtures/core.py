from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from loguru import logger
from sqlalchemy import StaticPool
from sqlmodel import Session, SQLModel, create_engine
from starlette.requests import Request

from src.setlist_studio.entities import ApplicationUser, ApplicationUserRepository

TEST_USER_ID = "test-user-id"
OTHER_USER_ID = "other-user-id"


@pytest.fixture
def session() -> Generator[Session]:
    """Create a fresh in-memory database session for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import table models so they register with the metadata
    import src.setlist_studio.entities  # noqa: F401

    SQLModel.metadata.create_all(engine)

    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()
            session.close()
            engine.dispose()


@pytest.fixture
def user_id(session: Session) -> str:
    """A persisted user owning the test library."""
    ApplicationUserRepository(session).create(
        ApplicationUser(id=TEST_USER_ID, display_name="Test User", email="test@example.com")
    )
    session.commit()
    return TEST_USER_ID


@pytest.fixture
def other_user_id(session: Session) -> str:
    ApplicationUserRepository(session).create(
        ApplicationUser(id=OTHER_USER_ID, display_name="Other User", email="other@example.com")
    )
    session.commit()
    return OTHER_USER_ID


@pytest.fixture
def log_messages() -> Generator[list[dict]]:
    """Capture loguru records as dicts with level, message and exception."""
    records: list[dict] = []

    def sink(message) -> None:
        record = message.record
        records.append(
            {
                "level": record["level"].name,
                "message": record["message"],
                "exception": record["exception"],
            }
        )

    handler_id = logger.add(sink, level="DEBUG")
    try:
        yield records
    finally:
        logger.remove(handler_id)


@pytest.fixture
def request_factory() -> Callable[..., Request]:
    def _make_request(
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
        path: str = "/",
        query_string: str = "",
        client: tuple[str, int] = ("127.0.0.1", 50000),
    ) -> Request:
        raw_headers = [
            (name.lower().encode("ascii"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ]
        if cookies:
            cookie_header = "; ".join(f"{name}={value}" for name, value in cookies.items())
            raw_headers.append((b"cookie", cookie_header.encode("latin-1")))
        scope = {
            "type": "http",
            "headers": raw_headers,
            "method": "GET",
            "path": path,
            "query_string": query_string.encode("latin-1"),
            "client": client,
        }
        return Request(scope)

    return _make_request
