from collections import defaultdict
from typing import Any, Iterable, Mapping

from hse_kpi.schemas.kpi import MonthlyAggregate
from hse_kpi.services.kpi.periods import month_bounds, week_to_month
from hse_kpi.services.kpi.rates import weighted_rates
from hse_kpi.services.kpi.reductions import REPORT_FIELD_RULES, reduce_rows
from hse_kpi.services.kpi.stores import KpiStores


def _report_order(report: Any):
    return (report.start_date, report.id or 0)


def closure_rate(findings_open: int, findings_closed: int) -> float:
    total = (findings_open or 0) + (findings_closed or 0)
    if total <= 0:
        return 0.0
    return round((findings_closed or 0) * 100 / total, 2)


def rollup_monthly(
    reports: Iterable[Any],
    poles_by_project: Mapping[int, str | None],
    month: int,
    year: int,
) -> list[MonthlyAggregate]:
    """Group finalized weekly reports of one month by pole.

    Every pole in `poles_by_project` gets a row, even with no reports.
    """
    projects_by_pole: dict[str, set[int]] = defaultdict(set)
    for pid, pole in poles_by_project.items():
        pole = (pole or "").strip()
        if pole:
            projects_by_pole[pole].add(pid)

    reports_by_pole: dict[str, list[Any]] = defaultdict(list)
    for r in reports:
        if r.start_date is None or r.end_date is None:
            continue
        if week_to_month(r.start_date, r.end_date) != (year, month):
            continue
        pole = (poles_by_project.get(r.project_id) or "").strip()
        if pole:
            reports_by_pole[pole].append(r)

    out = []
    for pole in sorted(projects_by_pole):
        rows = sorted(reports_by_pole.get(pole, []), key=_report_order)
        indicators = reduce_rows(rows, REPORT_FIELD_RULES, order_key=_report_order)
        rates = weighted_rates(rows)
        out.append(
            MonthlyAggregate(
                pole=pole,
                month=month,
                year=year,
                project_count=len(projects_by_pole[pole]),
                report_count=len(rows),
                indicators=indicators,
                tf_value=rates.tf_value,
                tg_value=rates.tg_value,
                closure_rate=closure_rate(indicators["findings_open"], indicators["findings_closed"]),
            )
        )
    return out


def aggregate_monthly(
    stores: KpiStores,
    month: int,
    year: int,
    project_id: int | None = None,
    pole: str | None = None,
) -> list[MonthlyAggregate]:
    if project_id is not None:
        project_ids = [project_id]
    else:
        project_ids = stores.directory.list_project_ids(pole=pole)
    poles = stores.directory.poles_of(project_ids)
    if pole:
        poles = {pid: p for pid, p in poles.items() if (p or "").strip() == pole.strip()}
    if not poles:
        return []

    # overlap query; week_to_month decides which month owns a straddling week
    first, last = month_bounds(year, month)
    reports = stores.reports.find_finalized_between(first, last, project_ids=list(poles))
    return rollup_monthly(reports, poles, month, year)
