"""Performance dates booked for setlists, scoped to one request."""

from datetime import UTC, datetime, time

from loguru import logger
from sqlmodel import Session

from src.setlist_studio.core.services.library.song_service import validation_failure
from src.setlist_studio.core.validation import check_malicious_content, check_max_length
from src.setlist_studio.entities.service.performance_date import (
    PerformanceDate,
    PerformanceDateRepository,
)
from src.setlist_studio.entities.service.setlist import SetlistRepository


class PerformanceDateService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._dates = PerformanceDateRepository(session)
        self._setlists = SetlistRepository(session)

    def get_performance_dates(self, setlist_id: str, user_id: str) -> list[PerformanceDate] | None:
        """Dates of an owned setlist, earliest first. None when the setlist is not owned."""
        if self._setlists.get(setlist_id, user_id, with_songs=False) is None:
            logger.warning("Setlist {} not found or unauthorized for user {}", setlist_id, user_id)
            return None
        dates = self._dates.list_for_setlist(setlist_id, user_id)
        logger.debug("Retrieved {} performance dates for setlist {}", len(dates), setlist_id)
        return dates

    def get_performance_date(self, performance_date_id: str, user_id: str) -> PerformanceDate | None:
        performance_date = self._dates.get(performance_date_id, user_id)
        if performance_date is None:
            logger.warning(
                "Performance date {} not found or unauthorized for user {}", performance_date_id, user_id
            )
        return performance_date

    def create_performance_date(self, performance_date: PerformanceDate) -> PerformanceDate | None:
        """Book a date for an owned setlist.

        Returns None when the setlist does not belong to ``performance_date.user_id``.

        Raises:
            ValueError: ``Validation failed: ...`` listing every problem.
        """
        if self._setlists.get(performance_date.setlist_id, performance_date.user_id, with_songs=False) is None:
            logger.warning(
                "Setlist {} not found or unauthorized for user {}",
                performance_date.setlist_id,
                performance_date.user_id,
            )
            return None

        errors = self.validate_performance_date(performance_date)
        if errors:
            raise validation_failure(errors)

        created = self._dates.create(performance_date)
        self._session.commit()
        logger.info(
            "Created performance date {} for setlist {} on {}",
            created.id,
            created.setlist_id,
            created.date,
        )
        return created

    def delete_performance_date(self, performance_date_id: str, user_id: str) -> bool:
        deleted = self._dates.delete(performance_date_id, user_id)
        if deleted:
            self._session.commit()
            logger.info("Deleted performance date {} for user {}", performance_date_id, user_id)
        return deleted

    def get_upcoming_performance_dates(
        self,
        user_id: str,
        page_number: int = 1,
        page_size: int = 20,
        today: datetime | None = None,
    ) -> tuple[list[PerformanceDate], int]:
        """Return ``(dates, total_count)`` from the start of today (UTC) onwards."""
        page_number = max(page_number, 1)
        today = today or datetime.now(UTC)
        since = datetime.combine(today.date(), time.min, tzinfo=UTC)
        return self._dates.list_upcoming(
            user_id, since, offset=(page_number - 1) * page_size, limit=page_size
        )

    def validate_performance_date(self, performance_date: PerformanceDate) -> list[str]:
        errors: list[str | None] = [
            check_max_length(performance_date.venue, 200, "Venue"),
            check_max_length(performance_date.notes, 1000, "Notes"),
            check_malicious_content(performance_date.venue, "Venue"),
            check_malicious_content(performance_date.notes, "Notes"),
        ]
        if not performance_date.user_id or not performance_date.user_id.strip():
            errors.append("User ID is required")
        return [error for error in errors if error]
