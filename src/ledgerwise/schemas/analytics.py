"""Analytics and settings schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from ledgerwise.periods.definitions import PeriodMode


class PeriodResponse(BaseModel):
    key: str
    label: str
    sub_label: str
    start_date: date
    end_date: date
    is_current: bool


class TrendPointResponse(BaseModel):
    key: str
    label: str
    income: Decimal
    expense: Decimal
    balance: Decimal


class CategoryAverageResponse(BaseModel):
    name: str
    value: Decimal
    color: str
    icon: str


class PeriodUsageResponse(BaseModel):
    period_keys_with_data: list[str]
    complete_period_keys: list[str]
    periods_used_for_average: list[str]
    periods_for_average_count: int


class AnalyticsSummary(BaseModel):
    current_income: Decimal
    current_expense: Decimal
    current_balance: Decimal
    average_expense: Decimal


class AnalyticsResponse(BaseModel):
    period_mode: PeriodMode
    periods: list[PeriodResponse]
    summary: AnalyticsSummary
    trends: list[TrendPointResponse]
    category_breakdown: list[CategoryAverageResponse]
    period_usage: PeriodUsageResponse
    total_transactions: int


class PeriodModeSetting(BaseModel):
    period_mode: PeriodMode
    label: str


class PeriodModeUpdate(BaseModel):
    # Unrecognized values normalize to calendar.
    period_mode: str | None = None
