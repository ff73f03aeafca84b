"""Period analytics over categorized transactions."""

from datetime import date, datetime
from typing import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.config import settings
from ledgerwise.models.transaction import Transaction
from ledgerwise.periods.aggregation import (
    ZERO,
    AnalyticsTransaction,
    CategoryRef,
    aggregate_by_period,
    average_expense,
    build_average_category_breakdown,
    build_trends,
    select_periods_for_averages,
)
from ledgerwise.periods.definitions import PeriodDefinition, PeriodMode, build_periods
from ledgerwise.repositories.transaction import TransactionRepository
from ledgerwise.schemas.analytics import (
    AnalyticsResponse,
    AnalyticsSummary,
    CategoryAverageResponse,
    PeriodResponse,
    PeriodUsageResponse,
    TrendPointResponse,
)
from ledgerwise.services.settings import SettingsService


def to_analytics_transaction(txn: Transaction) -> AnalyticsTransaction:
    category = None
    if txn.category is not None:
        category = CategoryRef(
            id=txn.category.id, name=txn.category.name, color=txn.category.color, icon=txn.category.icon
        )
    institution = txn.account.institution.value if txn.account is not None else None
    return AnalyticsTransaction(
        date=txn.date,
        amount=txn.amount,
        category=category,
        institution=institution,
        is_excluded=txn.is_excluded,
    )


def summarize(
    transactions: Iterable[AnalyticsTransaction],
    periods: Sequence[PeriodDefinition],
    mode: PeriodMode,
    cutoff_day: int,
) -> AnalyticsResponse:
    """Trends, current-period totals and complete-period averages."""
    transactions = list(transactions)
    aggregation = aggregate_by_period(transactions, periods, mode, cutoff_day)
    selection = select_periods_for_averages(aggregation.periods, aggregation.required_sources)
    trends = build_trends(periods, aggregation.periods)
    current_keys = {p.key for p in periods if p.is_current}
    current = next((t for t in trends if t.key in current_keys), None)

    return AnalyticsResponse(
        period_mode=mode,
        periods=[
            PeriodResponse(
                key=p.key,
                label=p.label,
                sub_label=p.sub_label,
                start_date=p.start_date,
                end_date=p.end_date,
                is_current=p.is_current,
            )
            for p in periods
        ],
        summary=AnalyticsSummary(
            current_income=current.income if current else ZERO,
            current_expense=current.expense if current else ZERO,
            current_balance=current.balance if current else ZERO,
            average_expense=average_expense(aggregation.periods, selection),
        ),
        trends=[
            TrendPointResponse(key=t.key, label=t.label, income=t.income, expense=t.expense, balance=t.balance)
            for t in trends
        ],
        category_breakdown=[
            CategoryAverageResponse(name=c.name, value=c.value, color=c.color, icon=c.icon)
            for c in build_average_category_breakdown(aggregation.categories, selection)
        ],
        period_usage=PeriodUsageResponse(
            period_keys_with_data=selection.period_keys_with_data,
            complete_period_keys=selection.complete_period_keys,
            periods_used_for_average=selection.periods_used_for_average,
            periods_for_average_count=selection.periods_for_average_count,
        ),
        total_transactions=sum(aggregation.periods[key].transaction_count for key in aggregation.periods),
    )


class AnalyticsService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.transaction_repo = TransactionRepository(db)
        self.settings_service = SettingsService(db)

    async def get_analytics(
        self, count: int | None = None, now: date | datetime | None = None
    ) -> AnalyticsResponse:
        mode = await self.settings_service.get_period_mode()
        cutoff = settings.billing_cutoff_day
        periods = build_periods(mode, now or date.today(), count or settings.analytics_default_periods, cutoff)
        rows = await self.transaction_repo.get_in_range(periods[0].start_date, periods[-1].end_date)
        return summarize((to_analytics_transaction(r) for r in rows), periods, mode, cutoff)
