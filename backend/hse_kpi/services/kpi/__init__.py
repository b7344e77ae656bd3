from hse_kpi.services.kpi.errors import KpiError, ValidationError, DuplicatePeriodError, ForbiddenOperation
from hse_kpi.services.kpi.rates import Rates, compute_rates, weighted_rates
from hse_kpi.services.kpi.periods import Period, week1_start, period_bounds, resolve_period, weeks_of_year, week_to_month
from hse_kpi.services.kpi.rollup import rollup_daily_entries
from hse_kpi.services.kpi.stores import KpiStores, SourceTotals
from hse_kpi.services.kpi.autopopulate import populate_draft, build_draft
from hse_kpi.services.kpi.lifecycle import TRANSITIONS, create_report, transition, allowed_actions
from hse_kpi.services.kpi.monthly import aggregate_monthly, rollup_monthly
