"""Collaborators the KPI engine reads from and writes to.

The engine only depends on these protocols; `KpiStores.from_session` wires the
SQLAlchemy implementations from `hse_kpi.crud`.
"""
import datetime as dt
from dataclasses import dataclass
from typing import Any, Iterable, Protocol

from sqlalchemy.orm import Session


@dataclass(frozen=True)
class SourceTotals:
    count: int = 0
    hours: float = 0.0
    closed: int = 0


class DailyEntryStore(Protocol):
    def find_by_project_and_period(self, project_id: int, period_number: int, period_year: int) -> list[Any]: ...


class SourceStore(Protocol):
    def sum_hours_and_counts(self, project_id: int, period_number: int, period_year: int) -> SourceTotals: ...


class ReportStore(Protocol):
    def find_one(self, project_id: int, period_number: int, period_year: int) -> Any | None: ...

    def save(self, report: Any) -> Any: ...

    def soft_delete(self, report_id: int) -> None: ...

    def find_finalized_between(
        self, date_from: dt.date, date_to: dt.date, project_ids: Iterable[int] | None = None
    ) -> list[Any]: ...


class ProjectPoleDirectory(Protocol):
    def poles_of(self, project_ids: Iterable[int]) -> dict[int, str | None]: ...

    def list_project_ids(self, pole: str | None = None) -> list[int]: ...


@dataclass
class KpiStores:
    daily_entries: DailyEntryStore
    trainings: SourceStore
    awareness_sessions: SourceStore
    work_permits: SourceStore
    deviations: SourceStore
    reports: ReportStore
    directory: ProjectPoleDirectory

    @classmethod
    def from_session(cls, db: Session) -> "KpiStores":
        from hse_kpi.crud.daily_entries import SqlDailyEntryStore
        from hse_kpi.crud.sources import SqlSourceStore, SqlDeviationStore
        from hse_kpi.crud.reports import SqlReportStore
        from hse_kpi.crud.projects import SqlProjectPoleDirectory
        from hse_kpi.db.models import Training, AwarenessSession, WorkPermit

        return cls(
            daily_entries=SqlDailyEntryStore(db),
            trainings=SqlSourceStore(db, Training, hours_column="training_hours"),
            awareness_sessions=SqlSourceStore(db, AwarenessSession, hours_column="session_hours"),
            work_permits=SqlSourceStore(db, WorkPermit),
            deviations=SqlDeviationStore(db),
            reports=SqlReportStore(db),
            directory=SqlProjectPoleDirectory(db),
        )
