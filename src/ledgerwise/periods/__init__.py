"""Accounting periods (calendar month or 10th-to-10th billing cycle) and aggregation."""

from .aggregation import (
    AnalyticsTransaction,
    CategoryRef,
    aggregate_by_period,
    build_average_category_breakdown,
    build_trends,
    select_periods_for_averages,
)
from .definitions import (
    DEFAULT_PERIOD_MODE,
    PeriodDefinition,
    PeriodMode,
    build_periods,
    get_period_key,
    normalize_period_mode,
)

__all__ = [
    "AnalyticsTransaction",
    "CategoryRef",
    "DEFAULT_PERIOD_MODE",
    "PeriodDefinition",
    "PeriodMode",
    "aggregate_by_period",
    "build_average_category_breakdown",
    "build_periods",
    "build_trends",
    "get_period_key",
    "normalize_period_mode",
    "select_periods_for_averages",
]
