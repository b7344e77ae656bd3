import datetime as dt
from enum import Enum
from sqlalchemy import ForeignKey, Date, DateTime, Float, Integer, String, Text, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hse_kpi.db.base import Base
from hse_kpi.db.models._mixins import TimestampMixin, SoftDeleteMixin

class ReportStatus(str, Enum):
    draft = "draft"
    submitted = "submitted"
    approved = "approved"
    rejected = "rejected"

class PeriodReport(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "kpi_report"
    __table_args__ = (
        Index(
            "uq_kpi_report_period",
            "project_id",
            "period_number",
            "period_year",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index("ix_kpi_report_dates", "start_date", "end_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.id", ondelete="CASCADE"), index=True)
    submitted_by: Mapped[int | None] = mapped_column(ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True)

    period_number: Mapped[int] = mapped_column(Integer)
    period_year: Mapped[int] = mapped_column(Integer)
    start_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)

    # rolled up from daily entries
    workforce: Mapped[int] = mapped_column(Integer, default=0)
    inductions: Mapped[int] = mapped_column(Integer, default=0)
    findings: Mapped[int] = mapped_column(Integer, default=0)
    near_misses: Mapped[int] = mapped_column(Integer, default=0)
    first_aid_cases: Mapped[int] = mapped_column(Integer, default=0)
    accidents: Mapped[int] = mapped_column(Integer, default=0)
    lost_workdays: Mapped[int] = mapped_column(Integer, default=0)
    hours_worked: Mapped[float] = mapped_column(Float, default=0.0)
    inspections: Mapped[int] = mapped_column(Integer, default=0)
    disciplinary_actions: Mapped[int] = mapped_column(Integer, default=0)
    hse_compliance_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    medical_compliance_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    noise_level: Mapped[float | None] = mapped_column(Float, nullable=True)
    water_consumption: Mapped[float] = mapped_column(Float, default=0.0)
    electricity_consumption: Mapped[float] = mapped_column(Float, default=0.0)

    # snapshot of source tables at draft time
    training_hours: Mapped[float] = mapped_column(Float, default=0.0)
    trainings_conducted: Mapped[int] = mapped_column(Integer, default=0)
    awareness_sessions: Mapped[int] = mapped_column(Integer, default=0)
    work_permits: Mapped[int] = mapped_column(Integer, default=0)
    findings_open: Mapped[int] = mapped_column(Integer, default=0)
    findings_closed: Mapped[int] = mapped_column(Integer, default=0)

    tf_value: Mapped[float] = mapped_column(Float, default=0.0)
    tg_value: Mapped[float] = mapped_column(Float, default=0.0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(16), default=ReportStatus.draft.value, index=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejected_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejected_by: Mapped[int | None] = mapped_column(ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    approved_by: Mapped[int | None] = mapped_column(ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    approved_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    submission_count: Mapped[int] = mapped_column(Integer, default=1)
    last_submitted_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    project = relationship("Project", back_populates="reports")
