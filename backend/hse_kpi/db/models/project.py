from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hse_kpi.db.base import Base
from hse_kpi.db.models._mixins import TimestampMixin

class Project(Base, TimestampMixin):
    __tablename__ = "project"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(256))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # organisational grouping used by dashboard rollups; blank means "no pole"
    pole: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)

    reports = relationship("PeriodReport", back_populates="project")
