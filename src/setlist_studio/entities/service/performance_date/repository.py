"""PerformanceDate repository."""

from datetime import datetime

from sqlmodel import Session, func, select

from .entity import PerformanceDate
from .table import PerformanceDateTable


class PerformanceDateRepository:
    """Data-access layer for performance dates. Every read is scoped to the owner."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_entity(row: PerformanceDateTable) -> PerformanceDate:
        return PerformanceDate.model_validate(row, from_attributes=True)

    def get(self, performance_date_id: str, user_id: str) -> PerformanceDate | None:
        row = self._session.get(PerformanceDateTable, performance_date_id)
        if row is None or row.user_id != user_id:
            return None
        return self._to_entity(row)

    def list_for_setlist(self, setlist_id: str, user_id: str) -> list[PerformanceDate]:
        statement = (
            select(PerformanceDateTable)
            .where(
                PerformanceDateTable.setlist_id == setlist_id,
                PerformanceDateTable.user_id == user_id,
            )
            .order_by(PerformanceDateTable.date)
        )
        return [self._to_entity(row) for row in self._session.exec(statement).all()]

    def list_upcoming(
        self, user_id: str, since: datetime, offset: int = 0, limit: int = 20
    ) -> tuple[list[PerformanceDate], int]:
        """Dates on or after ``since``, soonest first, plus the total."""
        statement = select(PerformanceDateTable).where(
            PerformanceDateTable.user_id == user_id, PerformanceDateTable.date >= since
        )
        total = self._session.exec(
            select(func.count()).select_from(statement.subquery())
        ).one()
        rows = self._session.exec(
            statement.order_by(PerformanceDateTable.date).offset(offset).limit(limit)
        ).all()
        return [self._to_entity(row) for row in rows], total

    def create(self, performance_date: PerformanceDate) -> PerformanceDate:
        row = PerformanceDateTable(**performance_date.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def delete(self, performance_date_id: str, user_id: str) -> bool:
        row = self._session.get(PerformanceDateTable, performance_date_id)
        if row is None or row.user_id != user_id:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def delete_for_setlist(self, setlist_id: str) -> int:
        rows = self._session.exec(
            select(PerformanceDateTable).where(PerformanceDateTable.setlist_id == setlist_id)
        ).all()
        for row in rows:
            self._session.delete(row)
        self._session.flush()
        return len(rows)
