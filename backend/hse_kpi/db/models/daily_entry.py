import datetime as dt
from sqlalchemy import ForeignKey, Date, Float, Integer, String, Text, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from hse_kpi.db.base import Base
from hse_kpi.db.models._mixins import TimestampMixin, SoftDeleteMixin

class DailyEntry(Base, TimestampMixin, SoftDeleteMixin):
    """One HSE submission per project and calendar day."""

    __tablename__ = "daily_kpi_entry"
    __table_args__ = (
        Index(
            "uq_daily_kpi_entry_day",
            "project_id",
            "entry_date",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index("ix_daily_kpi_entry_period", "project_id", "period_number", "period_year"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.id", ondelete="CASCADE"), index=True)
    submitted_by: Mapped[int | None] = mapped_column(ForeignKey("user.id", ondelete="SET NULL"), nullable=True)

    entry_date: Mapped[dt.date] = mapped_column(Date, index=True)
    period_number: Mapped[int] = mapped_column(Integer)
    period_year: Mapped[int] = mapped_column(Integer)

    workforce: Mapped[int] = mapped_column(Integer, default=0)  # KPI keeps the weekly peak
    inductions: Mapped[int] = mapped_column(Integer, default=0)
    findings: Mapped[int] = mapped_column(Integer, default=0)
    near_misses: Mapped[int] = mapped_column(Integer, default=0)
    first_aid_cases: Mapped[int] = mapped_column(Integer, default=0)
    accidents: Mapped[int] = mapped_column(Integer, default=0)
    lost_workdays: Mapped[int] = mapped_column(Integer, default=0)
    hours_worked: Mapped[float] = mapped_column(Float, default=0.0)
    inspections: Mapped[int] = mapped_column(Integer, default=0)
    training_hours: Mapped[float] = mapped_column(Float, default=0.0)  # auto, from trainings/awareness
    work_permits: Mapped[int] = mapped_column(Integer, default=0)  # auto, from permits
    disciplinary_actions: Mapped[int] = mapped_column(Integer, default=0)
    hse_compliance_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    medical_compliance_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    noise_level: Mapped[float | None] = mapped_column(Float, nullable=True)  # dB
    water_consumption: Mapped[float] = mapped_column(Float, default=0.0)  # m3
    electricity_consumption: Mapped[float] = mapped_column(Float, default=0.0)  # kWh

    status: Mapped[str] = mapped_column(String(16), default="draft")  # draft|submitted
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
