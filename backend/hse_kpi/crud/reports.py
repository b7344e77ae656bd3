import datetime as dt
from typing import Iterable
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hse_kpi.core.logging import logger
from hse_kpi.db.models.period_report import PeriodReport, ReportStatus
from hse_kpi.services.kpi.errors import DuplicatePeriodError

FINALIZED = (ReportStatus.submitted.value, ReportStatus.approved.value)


def get_report(db: Session, report_id: int) -> PeriodReport | None:
    return db.query(PeriodReport).filter(PeriodReport.id == report_id).one_or_none()


class SqlReportStore:
    def __init__(self, db: Session):
        self.db = db

    def _live(self):
        return self.db.query(PeriodReport).filter(PeriodReport.deleted_at.is_(None))

    def find_one(self, project_id: int, period_number: int, period_year: int) -> PeriodReport | None:
        return (
            self._live()
            .filter(
                PeriodReport.project_id == project_id,
                PeriodReport.period_number == period_number,
                PeriodReport.period_year == period_year,
            )
            .one_or_none()
        )

    def save(self, report: PeriodReport) -> PeriodReport:
        self.db.add(report)
        try:
            self.db.commit()
        except IntegrityError:
            # aborted transaction: rollback before looking for the winner
            self.db.rollback()
            if self.find_one(report.project_id, report.period_number, report.period_year) is not None:
                logger.warning(
                    "kpi_report_duplicate",
                    project_id=report.project_id,
                    period_number=report.period_number,
                    period_year=report.period_year,
                )
                raise DuplicatePeriodError(report.project_id, report.period_number, report.period_year)
            raise
        self.db.refresh(report)
        return report

    def soft_delete(self, report_id: int) -> None:
        report = get_report(self.db, report_id)
        if report is None or report.deleted_at is not None:
            return
        report.deleted_at = dt.datetime.now(dt.timezone.utc)
        self.db.commit()

    def find_finalized_between(
        self, date_from: dt.date, date_to: dt.date, project_ids: Iterable[int] | None = None
    ) -> list[PeriodReport]:
        q = self._live().filter(
            PeriodReport.status.in_(FINALIZED),
            PeriodReport.start_date.is_not(None),
            PeriodReport.end_date.is_not(None),
            PeriodReport.start_date <= date_to,
            PeriodReport.end_date >= date_from,
        )
        if project_ids is not None:
            q = q.filter(PeriodReport.project_id.in_(list(project_ids)))
        return q.order_by(PeriodReport.project_id, PeriodReport.start_date, PeriodReport.id).all()

    def find_for_backfill(
        self,
        year: int | None = None,
        project_id: int | None = None,
        week: int | None = None,
        status: str | None = ReportStatus.approved.value,
    ) -> list[PeriodReport]:
        q = self._live()
        if year is not None:
            q = q.filter(PeriodReport.period_year == year)
        if project_id is not None:
            q = q.filter(PeriodReport.project_id == project_id)
        if week is not None:
            q = q.filter(PeriodReport.period_number == week)
        if status and status != "all":
            q = q.filter(PeriodReport.status == status)
        return q.order_by(PeriodReport.id).all()
