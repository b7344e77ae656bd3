from enum import Enum
from typing import Any, Callable, Iterable, Mapping


class Reduction(str, Enum):
    SUM = "sum"
    MAX = "max"
    AVERAGE = "average"
    LATEST = "latest"


# Per-field rule for rolling daily entries into a weekly report.
DAILY_FIELD_RULES: dict[str, Reduction] = {
    "workforce": Reduction.MAX,  # peak daily headcount, not cumulative
    "inductions": Reduction.SUM,
    "findings": Reduction.SUM,
    "near_misses": Reduction.SUM,
    "first_aid_cases": Reduction.SUM,
    "accidents": Reduction.SUM,
    "lost_workdays": Reduction.SUM,
    "hours_worked": Reduction.SUM,
    "inspections": Reduction.SUM,
    "training_hours": Reduction.SUM,
    "work_permits": Reduction.SUM,
    "disciplinary_actions": Reduction.SUM,
    "hse_compliance_rate": Reduction.AVERAGE,
    "medical_compliance_rate": Reduction.AVERAGE,
    "noise_level": Reduction.LATEST,
    "water_consumption": Reduction.SUM,
    "electricity_consumption": Reduction.SUM,
}

# Weekly reports rolled into months/poles: same rules plus the source snapshot fields.
REPORT_FIELD_RULES: dict[str, Reduction] = {
    **DAILY_FIELD_RULES,
    "trainings_conducted": Reduction.SUM,
    "awareness_sessions": Reduction.SUM,
    "findings_open": Reduction.SUM,
    "findings_closed": Reduction.SUM,
}

FLOAT_FIELDS = {
    "hours_worked",
    "training_hours",
    "water_consumption",
    "electricity_consumption",
    "hse_compliance_rate",
    "medical_compliance_rate",
    "noise_level",
}


def _values(rows: list[Any], field: str) -> list[Any]:
    return [getattr(r, field, None) for r in rows]


def _zero(field: str):
    return 0.0 if field in FLOAT_FIELDS else 0


def reduce_field(rows: list[Any], field: str, rule: Reduction, order_key: Callable[[Any], Any] | None = None):
    if rule is Reduction.SUM:
        total = sum(v for v in _values(rows, field) if v is not None)
        return float(total) if field in FLOAT_FIELDS else int(total)

    if rule is Reduction.MAX:
        present = [v for v in _values(rows, field) if v is not None]
        return max(present) if present else _zero(field)

    if rule is Reduction.AVERAGE:
        # nulls are "not measured": excluded from numerator and denominator
        present = [float(v) for v in _values(rows, field) if v is not None]
        return round(sum(present) / len(present), 2) if present else None

    if rule is Reduction.LATEST:
        ordered = sorted(rows, key=order_key) if order_key else list(rows)
        for r in reversed(ordered):
            v = getattr(r, field, None)
            if v is not None:
                return v
        return None

    raise ValueError(f"Unknown reduction: {rule}")


def reduce_rows(
    rows: Iterable[Any],
    rules: Mapping[str, Reduction],
    order_key: Callable[[Any], Any] | None = None,
) -> dict[str, Any]:
    rows = list(rows)
    return {field: reduce_field(rows, field, rule, order_key) for field, rule in rules.items()}
