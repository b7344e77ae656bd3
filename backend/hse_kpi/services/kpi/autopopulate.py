from typing import Any, Mapping

from hse_kpi.schemas.kpi import PeriodReportDraft
from hse_kpi.services.kpi.periods import Period
from hse_kpi.services.kpi.rates import compute_rates
from hse_kpi.services.kpi.rollup import rollup_daily_entries
from hse_kpi.services.kpi.stores import KpiStores


def populate_draft(
    stores: KpiStores,
    project_id: int,
    period: Period,
    rollup: Mapping[str, Any],
    daily_count: int = 0,
) -> PeriodReportDraft:
    """Overlay source-table totals on a daily rollup and compute rates.

    The values are copied once; later edits to trainings, permits or
    observations do not flow back into a report built from this draft.
    """
    key = (project_id, period.number, period.year)
    trainings = stores.trainings.sum_hours_and_counts(*key)
    awareness = stores.awareness_sessions.sum_hours_and_counts(*key)
    permits = stores.work_permits.sum_hours_and_counts(*key)
    deviations = stores.deviations.sum_hours_and_counts(*key)

    fields = dict(rollup)
    # the daily training_hours / work_permits columns are fed by these same sources
    fields["training_hours"] = round(trainings.hours + awareness.hours, 2)
    fields["work_permits"] = permits.count
    fields["trainings_conducted"] = trainings.count
    fields["awareness_sessions"] = awareness.count
    fields["findings_closed"] = deviations.closed
    fields["findings_open"] = deviations.count - deviations.closed

    rates = compute_rates(fields.get("accidents", 0), fields.get("lost_workdays", 0), fields.get("hours_worked", 0.0))

    return PeriodReportDraft(
        project_id=project_id,
        period_number=period.number,
        period_year=period.year,
        start_date=period.start_date,
        end_date=period.end_date,
        tf_value=rates.tf_value,
        tg_value=rates.tg_value,
        sources={
            "daily_entries": daily_count,
            "trainings": trainings.count,
            "awareness_sessions": awareness.count,
            "work_permits": permits.count,
            "deviations": deviations.count,
        },
        **fields,
    )


def build_draft(stores: KpiStores, project_id: int, period: Period) -> PeriodReportDraft:
    entries = stores.daily_entries.find_by_project_and_period(project_id, period.number, period.year)
    return populate_draft(stores, project_id, period, rollup_daily_entries(entries), daily_count=len(entries))
