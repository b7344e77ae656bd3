import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hse_kpi.db.models  # noqa: F401
from hse_kpi.db.base import Base
from hse_kpi.db.models import Project, User, Role, PeriodReport
from hse_kpi.services.kpi.periods import period_bounds
from hse_kpi.services.kpi.stores import KpiStores


@pytest.fixture()
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def stores(db):
    return KpiStores.from_session(db)


def _project(db, code, pole):
    p = Project(code=code, name=f"Chantier {code}", pole=pole)
    db.add(p)
    db.commit()
    return p


def _user(db, login, role):
    u = User(login=login, full_name=login.title(), role=role)
    db.add(u)
    db.commit()
    return u


@pytest.fixture()
def project(db):
    return _project(db, "PRJ-1", "Nord")


@pytest.fixture()
def make_project(db):
    return lambda code, pole=None: _project(db, code, pole)


@pytest.fixture()
def owner(db):
    return _user(db, "owner", Role.responsable.value)


@pytest.fixture()
def other(db):
    return _user(db, "other", Role.responsable.value)


@pytest.fixture()
def manager(db):
    return _user(db, "manager", Role.hse_manager.value)


@pytest.fixture()
def add_report(db):
    def _add(project, number, year, status="approved", **fields):
        p = period_bounds(number, year)
        r = PeriodReport(
            project_id=project.id,
            period_number=number,
            period_year=year,
            start_date=p.start_date,
            end_date=p.end_date,
            status=status,
            **fields,
        )
        db.add(r)
        db.commit()
        return r

    return _add

