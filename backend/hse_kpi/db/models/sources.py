import datetime as dt
from sqlalchemy import ForeignKey, Date, Float, Integer, String, Index
from sqlalchemy.orm import Mapped, mapped_column

from hse_kpi.db.base import Base
from hse_kpi.db.models._mixins import TimestampMixin, SoftDeleteMixin

# Source tables feeding the weekly report snapshot. Only the columns the
# aggregation engine reads are modelled here.

class Training(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "training"
    __table_args__ = (Index("ix_training_period", "project_id", "period_number", "period_year"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.id", ondelete="CASCADE"), index=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    period_number: Mapped[int] = mapped_column(Integer)
    period_year: Mapped[int] = mapped_column(Integer)
    theme: Mapped[str] = mapped_column(String(256))
    participants: Mapped[int] = mapped_column(Integer, default=0)
    duration_hours: Mapped[float] = mapped_column(Float, default=0.0)
    training_hours: Mapped[float] = mapped_column(Float, default=0.0)  # duration x participants

class AwarenessSession(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "awareness_session"
    __table_args__ = (Index("ix_awareness_session_period", "project_id", "period_number", "period_year"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.id", ondelete="CASCADE"), index=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    period_number: Mapped[int] = mapped_column(Integer)
    period_year: Mapped[int] = mapped_column(Integer)
    theme: Mapped[str] = mapped_column(String(500))
    participants: Mapped[int] = mapped_column(Integer, default=0)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=0)
    session_hours: Mapped[float] = mapped_column(Float, default=0.0)

class WorkPermit(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "work_permit"
    __table_args__ = (Index("ix_work_permit_period", "project_id", "period_number", "period_year"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.id", ondelete="CASCADE"), index=True)
    period_number: Mapped[int] = mapped_column(Integer)
    period_year: Mapped[int] = mapped_column(Integer)
    permit_number: Mapped[str] = mapped_column(String(64), unique=True)
    commence_date: Mapped[dt.date] = mapped_column(Date)
    end_date: Mapped[dt.date] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(16), default="draft")  # draft|active|closed|cancelled

class Deviation(Base, TimestampMixin, SoftDeleteMixin):
    """Safety observation (SOR) raised on site; closed once corrected."""

    __tablename__ = "deviation"
    __table_args__ = (Index("ix_deviation_period", "project_id", "period_number", "period_year"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.id", ondelete="CASCADE"), index=True)
    observation_date: Mapped[dt.date] = mapped_column(Date, index=True)
    period_number: Mapped[int] = mapped_column(Integer)
    period_year: Mapped[int] = mapped_column(Integer)
    category: Mapped[str | None] = mapped_column(String(128), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="open")  # open|in_progress|closed
