from sqlalchemy.orm import Session

from hse_kpi.worker.celery_app import celery_app
from hse_kpi.core.logging import logger
from hse_kpi.db.session import SessionLocal
from hse_kpi.services.kpi.backfill import backfill_hours_and_rates


@celery_app.task(name="kpi.backfill_hours_and_rates", bind=True)
def backfill_hours_and_rates_task(
    self,
    year: int | None = None,
    project_id: int | None = None,
    week: int | None = None,
    status: str = "approved",
    dry_run: bool = False,
    set_zero_when_missing: bool = False,
) -> dict:
    db: Session = SessionLocal()
    try:
        return backfill_hours_and_rates(
            db,
            year=year,
            project_id=project_id,
            week=week,
            status=status,
            dry_run=dry_run,
            set_zero_when_missing=set_zero_when_missing,
        )
    except Exception as e:
        logger.exception("kpi_backfill_failed", task_id=self.request.id, year=year, project_id=project_id, error=str(e))
        db.rollback()
        raise
    finally:
        db.close()
