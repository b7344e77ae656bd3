from sqlalchemy import case, func, literal
from sqlalchemy.orm import Session

from hse_kpi.db.models.sources import Deviation
from hse_kpi.services.kpi.stores import SourceTotals


class SqlSourceStore:
    """Counts (and optionally sums hours of) one source table for a project week."""

    def __init__(self, db: Session, model, hours_column: str | None = None):
        self.db = db
        self.model = model
        self.hours_column = hours_column

    def _scoped(self, q, project_id: int, period_number: int, period_year: int):
        m = self.model
        return q.filter(
            m.project_id == project_id,
            m.period_number == period_number,
            m.period_year == period_year,
            m.deleted_at.is_(None),
        )

    def sum_hours_and_counts(self, project_id: int, period_number: int, period_year: int) -> SourceTotals:
        m = self.model
        if self.hours_column:
            hours_expr = func.coalesce(func.sum(getattr(m, self.hours_column)), 0.0)
        else:
            hours_expr = literal(0.0)
        count, hours = self._scoped(self.db.query(func.count(m.id), hours_expr), project_id, period_number, period_year).one()
        return SourceTotals(count=int(count or 0), hours=float(hours or 0.0))


class SqlDeviationStore(SqlSourceStore):
    def __init__(self, db: Session):
        super().__init__(db, Deviation)

    def sum_hours_and_counts(self, project_id: int, period_number: int, period_year: int) -> SourceTotals:
        closed_expr = func.coalesce(func.sum(case((Deviation.status == "closed", 1), else_=0)), 0)
        count, closed = self._scoped(
            self.db.query(func.count(Deviation.id), closed_expr), project_id, period_number, period_year
        ).one()
        return SourceTotals(count=int(count or 0), closed=int(closed or 0))
