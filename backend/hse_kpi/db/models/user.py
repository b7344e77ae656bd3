from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from enum import Enum

from hse_kpi.db.base import Base
from hse_kpi.db.models._mixins import TimestampMixin

class Role(str, Enum):
    admin = "admin"
    hse_manager = "hse_manager"
    responsable = "responsable"
    supervisor = "supervisor"
    viewer = "viewer"

class User(Base, TimestampMixin):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(primary_key=True)
    login: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    full_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    role: Mapped[str] = mapped_column(String(32), default=Role.responsable.value)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
