"""Audit day calendar - the one evaluation date per month."""

import calendar
from datetime import date, datetime, timedelta

FALLBACK_DAY = 22
AUDIT_WEEK = 4


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def full_week_mondays(year: int, month: int) -> list[date]:
    """Mondays of every Sunday-Saturday week lying entirely inside the month."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    first = date(year, month, 1)
    # weekday(): Monday=0 .. Sunday=6
    sunday = first + timedelta(days=(6 - first.weekday()) % 7)
    mondays = []
    while sunday.day + 6 <= last_day and sunday.month == month:
        mondays.append(sunday + timedelta(days=1))
        sunday += timedelta(days=7)
    return mondays


def audit_day(year: int, month: int) -> date:
    """
    Monday of the 4th full (Sun-Sat) week of the month.

    Falls back to the Monday of the last full week, then to the first Monday
    on or after the 22nd.
    """
    mondays = full_week_mondays(year, month)
    if len(mondays) >= AUDIT_WEEK:
        return mondays[AUDIT_WEEK - 1]
    if mondays:
        return mondays[-1]
    fallback = date(year, month, FALLBACK_DAY)
    return fallback + timedelta(days=(7 - fallback.weekday()) % 7)


def is_audit_day(today: date) -> bool:
    """True when `today` is its month's audit day."""
    today = _as_date(today)
    return today == audit_day(today.year, today.month)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def next_audit_day_from(from_date: date) -> date:
    """This month's audit day if not yet passed, else next month's."""
    from_date = _as_date(from_date)
    current = audit_day(from_date.year, from_date.month)
    if from_date <= current:
        return current
    return audit_day(*_shift_month(from_date.year, from_date.month, 1))


def previous_audit_day_from(from_date: date) -> date:
    """This month's audit day if already reached, else the prior month's."""
    from_date = _as_date(from_date)
    current = audit_day(from_date.year, from_date.month)
    if from_date < current:
        return audit_day(*_shift_month(from_date.year, from_date.month, -1))
    return current
