"""Reporting calendar.

Weeks run from the configured start weekday (Saturday) to the day before it,
52 weeks per week-year. Week 1 of year Y starts on the start weekday on or
before 31 December of Y-1, so the last days of December usually belong to the
next week-year. Reference: week 48/2025 = Sat 22/11/2025 - Fri 28/11/2025.

Some years are 53 weeks long between two week-1 anchors; the overflow week is
folded into week 52, which then spans 14 days.
"""
import datetime as dt
from dataclasses import dataclass

from hse_kpi.core.config import settings
from hse_kpi.services.kpi.errors import ValidationError


@dataclass(frozen=True)
class Period:
    number: int
    year: int
    start_date: dt.date
    end_date: dt.date

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def label(self) -> str:
        return f"Semaine {self.number} ({self.start_date:%d/%m} - {self.end_date:%d/%m})"

    def contains(self, d: dt.date) -> bool:
        return self.start_date <= d <= self.end_date


def week1_start(year: int, start_weekday: int | None = None) -> dt.date:
    wd = settings.WEEK_START_WEEKDAY if start_weekday is None else start_weekday
    dec31 = dt.date(year - 1, 12, 31)
    return dec31 - dt.timedelta(days=(dec31.weekday() - wd) % 7)


def period_bounds(number: int, year: int, start_weekday: int | None = None) -> Period:
    weeks = settings.WEEKS_PER_YEAR
    if number < 1 or number > weeks:
        raise ValidationError(f"Week number must be between 1 and {weeks}", field="period_number")

    start = week1_start(year, start_weekday) + dt.timedelta(days=(number - 1) * 7)
    end = start + dt.timedelta(days=6)
    if number == weeks:
        # absorbs a 53rd week when the next anchor is 371 days away
        end = week1_start(year + 1, start_weekday) - dt.timedelta(days=1)
    return Period(number=number, year=year, start_date=start, end_date=end)


def resolve_period(d: dt.date, start_weekday: int | None = None) -> Period:
    if isinstance(d, dt.datetime):
        d = d.date()
    year = d.year
    if d >= week1_start(year + 1, start_weekday):
        year += 1

    number = (d - week1_start(year, start_weekday)).days // 7 + 1
    number = max(1, min(settings.WEEKS_PER_YEAR, number))
    return period_bounds(number, year, start_weekday)


def weeks_of_year(year: int, start_weekday: int | None = None) -> list[Period]:
    return [period_bounds(w, year, start_weekday) for w in range(1, settings.WEEKS_PER_YEAR + 1)]


def week_to_month(start: dt.date, end: dt.date) -> tuple[int, int]:
    """Month (year, month) owning a week: the one with more of its days, ties go to the end date's month."""
    if end < start:
        start, end = end, start
    if (start.year, start.month) == (end.year, end.month):
        return start.year, start.month

    counts: dict[tuple[int, int], int] = {}
    d = start
    while d <= end:
        k = (d.year, d.month)
        counts[k] = counts.get(k, 0) + 1
        d += dt.timedelta(days=1)

    best = max(counts.values())
    leaders = [k for k, n in counts.items() if n == best]
    if len(leaders) > 1:
        return end.year, end.month
    return leaders[0]


def month_bounds(year: int, month: int) -> tuple[dt.date, dt.date]:
    first = dt.date(year, month, 1)
    if month == 12:
        next_m = dt.date(year + 1, 1, 1)
    else:
        next_m = dt.date(year, month + 1, 1)
    return first, next_m - dt.timedelta(days=1)
