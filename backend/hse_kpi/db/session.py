from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from hse_kpi.core.config import settings
from hse_kpi.db.base import Base

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db() -> None:
    # dev-only convenience; production schemas are managed outside the engine
    import hse_kpi.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
