import datetime as dt
from sqlalchemy import func
from sqlalchemy.orm import Session

from hse_kpi.db.models.daily_entry import DailyEntry
from hse_kpi.schemas.kpi import DailyEntryIn
from hse_kpi.services.kpi.periods import resolve_period


def get_daily_entry(db: Session, project_id: int, entry_date: dt.date) -> DailyEntry | None:
    return (
        db.query(DailyEntry)
        .filter(
            DailyEntry.project_id == project_id,
            DailyEntry.entry_date == entry_date,
            DailyEntry.deleted_at.is_(None),
        )
        .one_or_none()
    )


def record_daily_entry(db: Session, data: DailyEntryIn) -> DailyEntry:
    """Create or overwrite the single live entry for (project, day)."""
    period = resolve_period(data.entry_date)
    values = data.model_dump(exclude={"project_id", "entry_date"})

    entry = get_daily_entry(db, data.project_id, data.entry_date)
    if entry is None:
        entry = DailyEntry(project_id=data.project_id, entry_date=data.entry_date)
        db.add(entry)
    entry.period_number = period.number
    entry.period_year = period.year
    for k, v in values.items():
        setattr(entry, k, v)
    db.commit()
    db.refresh(entry)
    return entry


def sum_hours_worked(db: Session, project_id: int, period_number: int, period_year: int) -> tuple[float, int]:
    hours, n = (
        db.query(func.coalesce(func.sum(DailyEntry.hours_worked), 0.0), func.count(DailyEntry.id))
        .filter(
            DailyEntry.project_id == project_id,
            DailyEntry.period_number == period_number,
            DailyEntry.period_year == period_year,
            DailyEntry.status == "submitted",
            DailyEntry.deleted_at.is_(None),
        )
        .one()
    )
    return float(hours or 0.0), int(n or 0)


class SqlDailyEntryStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_project_and_period(self, project_id: int, period_number: int, period_year: int) -> list[DailyEntry]:
        # drafts are still being typed in by the site team and never feed the KPI
        return (
            self.db.query(DailyEntry)
            .filter(
                DailyEntry.project_id == project_id,
                DailyEntry.period_number == period_number,
                DailyEntry.period_year == period_year,
                DailyEntry.status == "submitted",
                DailyEntry.deleted_at.is_(None),
            )
            .order_by(DailyEntry.entry_date)
            .all()
        )
