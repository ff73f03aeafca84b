"""Accounting period definitions.

Two modes are supported:

- ``calendar``: each period is a calendar month (1st to last day).
- ``billing``: each period runs from the 10th of one month to the 9th of the
  next, matching Israeli credit-card billing cycles.

Periods are keyed by the ``YYYY-MM`` of their start date and derived purely
from a reference date; nothing here is persisted.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

BILLING_CUTOFF_DAY = 10

HEBREW_MONTHS = (
    "ינואר",
    "פברואר",
    "מרץ",
    "אפריל",
    "מאי",
    "יוני",
    "יולי",
    "אוגוסט",
    "ספטמבר",
    "אוקטובר",
    "נובמבר",
    "דצמבר",
)


class PeriodMode(str, Enum):
    CALENDAR = "calendar"
    BILLING = "billing"


DEFAULT_PERIOD_MODE = PeriodMode.CALENDAR


@dataclass(frozen=True)
class PeriodDefinition:
    key: str
    label: str
    sub_label: str
    start_date: date
    end_date: date
    is_current: bool

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


def normalize_period_mode(value: str | PeriodMode | None) -> PeriodMode:
    """Parse a stored/requested mode; anything unrecognized means calendar."""
    if isinstance(value, PeriodMode):
        return value
    if isinstance(value, str) and value.strip().lower() == PeriodMode.BILLING.value:
        return PeriodMode.BILLING
    return DEFAULT_PERIOD_MODE


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def month_name(month: int) -> str:
    return HEBREW_MONTHS[month - 1]


def get_period_start(
    day: date | datetime,
    mode: str | PeriodMode,
    cutoff_day: int = BILLING_CUTOFF_DAY,
) -> date:
    day = _as_date(day)
    if normalize_period_mode(mode) is PeriodMode.CALENDAR:
        return day.replace(day=1)
    cycle_start = day.replace(day=cutoff_day)
    return cycle_start if day.day >= cutoff_day else add_months(cycle_start, -1)


def get_period_end(
    day: date | datetime,
    mode: str | PeriodMode,
    cutoff_day: int = BILLING_CUTOFF_DAY,
) -> date:
    start = get_period_start(day, mode, cutoff_day)
    return add_months(start, 1) - timedelta(days=1)


def get_period_key(
    day: date | datetime,
    mode: str | PeriodMode,
    cutoff_day: int = BILLING_CUTOFF_DAY,
) -> str:
    """Key (``YYYY-MM`` of the period start) of the period containing ``day``."""
    return get_period_start(day, mode, cutoff_day).strftime("%Y-%m")


def build_periods(
    mode: str | PeriodMode,
    reference: date | datetime,
    count: int,
    cutoff_day: int = BILLING_CUTOFF_DAY,
) -> list[PeriodDefinition]:
    """``count`` consecutive periods ending with the one containing ``reference``.

    Ordered oldest first; only the last period has ``is_current`` set.
    """
    mode = normalize_period_mode(mode)
    current_start = get_period_start(reference, mode, cutoff_day)

    periods: list[PeriodDefinition] = []
    for offset in range(count - 1, -1, -1):
        start = add_months(current_start, -offset)
        end = add_months(start, 1) - timedelta(days=1)
        if mode is PeriodMode.CALENDAR:
            sub_label = str(start.year)
        else:
            sub_label = f"{start:%d/%m} - {end:%d/%m/%Y}"
        periods.append(
            PeriodDefinition(
                key=start.strftime("%Y-%m"),
                label=month_name(start.month),
                sub_label=sub_label,
                start_date=start,
                end_date=end,
                is_current=offset == 0,
            )
        )
    return periods


def period_mode_label(mode: str | PeriodMode) -> str:
    if normalize_period_mode(mode) is PeriodMode.BILLING:
        return "מחזור חיוב (10-10)"
    return "חודש קלנדרי (1-1)"
