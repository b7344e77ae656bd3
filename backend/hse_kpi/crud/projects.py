from typing import Iterable
from sqlalchemy import func
from sqlalchemy.orm import Session

from hse_kpi.db.models.project import Project


class SqlProjectPoleDirectory:
    def __init__(self, db: Session):
        self.db = db

    def poles_of(self, project_ids: Iterable[int]) -> dict[int, str | None]:
        ids = list(project_ids)
        if not ids:
            return {}
        rows = self.db.query(Project.id, Project.pole).filter(Project.id.in_(ids)).all()
        return {pid: (pole.strip() or None) if pole else None for pid, pole in rows}

    def list_project_ids(self, pole: str | None = None) -> list[int]:
        q = self.db.query(Project.id)
        if pole:
            q = q.filter(func.trim(Project.pole) == pole.strip())
        return [pid for (pid,) in q.order_by(Project.id).all()]
