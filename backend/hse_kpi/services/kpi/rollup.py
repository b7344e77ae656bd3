from typing import Any, Iterable

from hse_kpi.services.kpi.reductions import DAILY_FIELD_RULES, reduce_rows


def _entry_order(entry: Any):
    return (entry.entry_date, getattr(entry, "id", 0) or 0)


def rollup_daily_entries(entries: Iterable[Any]) -> dict[str, Any]:
    """Reduce one project/week of daily entries into report fields.

    With no entries, summed and peak fields are 0 while averaged and latest
    fields are None, so "not measured" stays distinct from a measured zero.
    """
    return reduce_rows(entries, DAILY_FIELD_RULES, order_key=_entry_order)
