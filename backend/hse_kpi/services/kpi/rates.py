from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class Rates:
    tf_value: float
    tg_value: float


def compute_rates(accidents: int, lost_workdays: int, hours_worked: float) -> Rates:
    """TF = accidents per million hours, TG = lost workdays per thousand hours.

    No hours worked means no exposure, so both rates are 0 rather than an error.
    """
    hours = float(hours_worked or 0.0)
    if hours <= 0:
        return Rates(tf_value=0.0, tg_value=0.0)
    tf = round((accidents or 0) * 1_000_000 / hours, 2)
    tg = round((lost_workdays or 0) * 1_000 / hours, 4)
    return Rates(tf_value=tf, tg_value=tg)


def weighted_rates(rows: Iterable[Any]) -> Rates:
    # rates over many reports come from summed inputs, never from averaging stored rates
    accidents = 0
    lost = 0
    hours = 0.0
    for r in rows:
        accidents += int(r.accidents or 0)
        lost += int(r.lost_workdays or 0)
        hours += float(r.hours_worked or 0.0)
    return compute_rates(accidents, lost, hours)
