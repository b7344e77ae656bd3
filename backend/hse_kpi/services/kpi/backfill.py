from sqlalchemy.orm import Session

from hse_kpi.core.logging import logger
from hse_kpi.crud.daily_entries import sum_hours_worked
from hse_kpi.crud.reports import SqlReportStore
from hse_kpi.services.kpi.rates import compute_rates


def backfill_hours_and_rates(
    db: Session,
    year: int | None = None,
    project_id: int | None = None,
    week: int | None = None,
    status: str = "approved",
    dry_run: bool = False,
    set_zero_when_missing: bool = False,
) -> dict:
    """Re-sum hours_worked from submitted daily entries and recompute TF/TG.

    `status="all"` selects every live report. Reports without daily entries
    are left alone unless `set_zero_when_missing` is set.
    """
    store = SqlReportStore(db)
    reports = store.find_for_backfill(year=year, project_id=project_id, week=week, status=status)
    stats = {"scanned": len(reports), "updated": 0, "unchanged": 0, "skipped_no_entries": 0}

    for r in reports:
        hours, n = sum_hours_worked(db, r.project_id, r.period_number, r.period_year)
        if n == 0 and not set_zero_when_missing:
            stats["skipped_no_entries"] += 1
            continue

        rates = compute_rates(r.accidents, r.lost_workdays, hours)
        new = (round(hours, 2), rates.tf_value, rates.tg_value)
        if new == (round(r.hours_worked or 0.0, 2), r.tf_value, r.tg_value):
            stats["unchanged"] += 1
            continue

        stats["updated"] += 1
        if dry_run:
            logger.info("kpi_backfill_would_update", report_id=r.id, hours_worked=new[0], tf_value=new[1], tg_value=new[2])
            continue
        r.hours_worked, r.tf_value, r.tg_value = new

    if dry_run:
        db.rollback()
    else:
        db.commit()

    logger.info(
        "kpi_backfill_finished",
        year=year,
        project_id=project_id,
        week=week,
        status=status,
        dry_run=dry_run,
        **stats,
    )
    return stats
