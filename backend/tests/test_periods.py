import datetime as dt
import pytest

from hse_kpi.services.kpi.errors import ValidationError
from hse_kpi.services.kpi.periods import (
    period_bounds,
    resolve_period,
    week1_start,
    week_to_month,
    weeks_of_year,
)


def test_week1_starts_on_saturday_before_new_year():
    assert week1_start(2026) == dt.date(2025, 12, 27)
    assert week1_start(2025) == dt.date(2024, 12, 28)
    assert week1_start(2026).weekday() == 5


def test_reference_week():
    p = period_bounds(48, 2025)
    assert p.start_date == dt.date(2025, 11, 22)
    assert p.end_date == dt.date(2025, 11, 28)
    assert p.label == "Semaine 48 (22/11 - 28/11)"


def test_resolve_inside_week():
    for d in (dt.date(2025, 11, 22), dt.date(2025, 11, 25), dt.date(2025, 11, 28)):
        p = resolve_period(d)
        assert (p.number, p.year) == (48, 2025)
        assert p.contains(d)


def test_trailing_december_belongs_to_next_year():
    p = resolve_period(dt.date(2025, 12, 28))
    assert (p.number, p.year) == (1, 2026)
    assert p.start_date == dt.date(2025, 12, 27)
    assert p.end_date == dt.date(2026, 1, 2)

    p = resolve_period(dt.date(2025, 12, 26))
    assert (p.number, p.year) == (52, 2025)
    assert (p.start_date, p.end_date) == (dt.date(2025, 12, 20), dt.date(2025, 12, 26))


def test_53rd_week_folds_into_52():
    # 2028 spans 371 days between week-1 anchors
    p = period_bounds(52, 2028)
    assert p.start_date == dt.date(2028, 12, 16)
    assert p.end_date == dt.date(2028, 12, 29)
    assert p.days == 14

    p = resolve_period(dt.date(2028, 12, 25))
    assert (p.number, p.year) == (52, 2028)
    assert p.contains(dt.date(2028, 12, 25))

    p = resolve_period(dt.date(2028, 12, 30))
    assert (p.number, p.year) == (1, 2029)


def test_every_day_lies_in_its_period():
    d = dt.date(2024, 12, 1)
    while d <= dt.date(2029, 1, 31):
        p = resolve_period(d)
        assert p.start_date <= d <= p.end_date
        assert 1 <= p.number <= 52
        d += dt.timedelta(days=1)


def test_resolve_accepts_datetime():
    p = resolve_period(dt.datetime(2025, 11, 24, 17, 30))
    assert (p.number, p.year) == (48, 2025)


@pytest.mark.parametrize("number", [0, 53, -1])
def test_period_bounds_rejects_out_of_range(number):
    with pytest.raises(ValidationError) as e:
        period_bounds(number, 2025)
    assert e.value.field == "period_number"


def test_weeks_of_year_are_contiguous():
    weeks = weeks_of_year(2025)
    assert len(weeks) == 52
    assert weeks[0].start_date == week1_start(2025)
    for a, b in zip(weeks, weeks[1:]):
        assert b.start_date == a.end_date + dt.timedelta(days=1)
    assert weeks[-1].end_date + dt.timedelta(days=1) == week1_start(2026)


def test_week_to_month_majority():
    # Sat 29/11 - Fri 05/12: 2 days in November, 5 in December
    assert week_to_month(dt.date(2025, 11, 29), dt.date(2025, 12, 5)) == (2025, 12)
    assert week_to_month(dt.date(2025, 11, 22), dt.date(2025, 11, 28)) == (2025, 11)
    assert week_to_month(dt.date(2025, 12, 27), dt.date(2026, 1, 2)) == (2025, 12)


def test_week_to_month_tie_and_inverted_range():
    assert week_to_month(dt.date(2026, 1, 30), dt.date(2026, 2, 2)) == (2026, 2)
    assert week_to_month(dt.date(2025, 12, 5), dt.date(2025, 11, 29)) == (2025, 12)
