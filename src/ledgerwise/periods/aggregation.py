"""Period bucketing and averages.

Averages are computed over "complete" periods only: periods that have data
from every institution kind (bank, credit card) seen anywhere in the analyzed
transactions. A freshly imported bank account with a short history would
otherwise drag averages down with partial-period totals. When no period is
complete yet, every period with any income or expense is used instead.

All money is ``Decimal``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Hashable, Iterable, Sequence

from ledgerwise.core.institutions import is_bank_institution, is_credit_institution

from .definitions import BILLING_CUTOFF_DAY, PeriodDefinition, PeriodMode, get_period_key

ZERO = Decimal("0")
CENT = Decimal("0.01")
DEFAULT_CATEGORY_COLOR = "#888888"


@dataclass(frozen=True)
class CategoryRef:
    id: Hashable
    name: str
    color: str | None = None
    icon: str | None = None


@dataclass(frozen=True)
class AnalyticsTransaction:
    date: date | datetime
    amount: Decimal
    category: CategoryRef | None = None
    institution: str | None = None
    is_excluded: bool = False


@dataclass
class PeriodAggregate:
    income: Decimal = ZERO
    expense: Decimal = ZERO
    transaction_count: int = 0
    bank_count: int = 0
    credit_count: int = 0

    @property
    def has_data(self) -> bool:
        return self.income > 0 or self.expense > 0


@dataclass
class CategoryAggregate:
    id: Hashable
    name: str
    color: str
    icon: str
    totals_by_period: dict[str, Decimal] = field(default_factory=dict)
    total: Decimal = ZERO


@dataclass(frozen=True)
class RequiredSources:
    requires_bank: bool = False
    requires_credit: bool = False


@dataclass
class PeriodAggregation:
    periods: dict[str, PeriodAggregate]
    categories: dict[Hashable, CategoryAggregate]
    required_sources: RequiredSources


@dataclass(frozen=True)
class PeriodUsageSelection:
    period_keys_with_data: list[str]
    complete_period_keys: list[str]
    periods_used_for_average: list[str]
    periods_for_average_count: int


@dataclass(frozen=True)
class TrendPoint:
    key: str
    label: str
    income: Decimal
    expense: Decimal
    balance: Decimal


@dataclass(frozen=True)
class CategoryAverage:
    id: Hashable
    name: str
    value: Decimal
    color: str
    icon: str


def _to_decimal(value: Decimal | int | str) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def aggregate_by_period(
    transactions: Iterable[AnalyticsTransaction],
    periods: Sequence[PeriodDefinition],
    mode: str | PeriodMode,
    cutoff_day: int = BILLING_CUTOFF_DAY,
) -> PeriodAggregation:
    """Bucket transactions into the given periods.

    Excluded transactions and transactions outside every period are ignored.
    Income is the sum of positive amounts; expense the sum of absolute
    negative amounts. Category totals track expenses only. The bank and
    credit requirements only consider transactions inside the period window.
    """
    aggregates = {period.key: PeriodAggregate() for period in periods}
    categories: dict[Hashable, CategoryAggregate] = {}
    requires_bank = requires_credit = False

    for tx in transactions:
        if tx.is_excluded:
            continue
        key = get_period_key(tx.date, mode, cutoff_day)
        aggregate = aggregates.get(key)
        if aggregate is None:
            continue

        amount = _to_decimal(tx.amount)
        aggregate.transaction_count += 1
        if amount > 0:
            aggregate.income += amount
        else:
            aggregate.expense += abs(amount)

        if is_bank_institution(tx.institution):
            aggregate.bank_count += 1
            requires_bank = True
        if is_credit_institution(tx.institution):
            aggregate.credit_count += 1
            requires_credit = True

        if tx.category is not None and amount < 0:
            category = categories.get(tx.category.id)
            if category is None:
                category = categories[tx.category.id] = CategoryAggregate(
                    id=tx.category.id,
                    name=tx.category.name,
                    color=tx.category.color or DEFAULT_CATEGORY_COLOR,
                    icon=tx.category.icon or "",
                )
            category.totals_by_period[key] = category.totals_by_period.get(key, ZERO) + abs(amount)
            category.total += abs(amount)

    return PeriodAggregation(
        periods=aggregates,
        categories=categories,
        required_sources=RequiredSources(requires_bank, requires_credit),
    )


def is_complete(aggregate: PeriodAggregate, required: RequiredSources) -> bool:
    if not aggregate.has_data:
        return False
    if required.requires_bank and aggregate.bank_count == 0:
        return False
    if required.requires_credit and aggregate.credit_count == 0:
        return False
    return True


def select_periods_for_averages(
    aggregates: dict[str, PeriodAggregate], required: RequiredSources
) -> PeriodUsageSelection:
    """Pick the periods averages are computed over.

    Complete periods if there are any, otherwise every period with data. The
    divisor is never below 1.
    """
    with_data = [key for key, entry in aggregates.items() if entry.has_data]
    complete = [key for key, entry in aggregates.items() if is_complete(entry, required)]
    used = complete or with_data
    return PeriodUsageSelection(
        period_keys_with_data=with_data,
        complete_period_keys=complete,
        periods_used_for_average=used,
        periods_for_average_count=max(len(used), 1),
    )


def build_trends(
    periods: Sequence[PeriodDefinition], aggregates: dict[str, PeriodAggregate]
) -> list[TrendPoint]:
    points = []
    for period in periods:
        data = aggregates.get(period.key) or PeriodAggregate()
        points.append(
            TrendPoint(
                key=period.key,
                label=period.label,
                income=data.income,
                expense=data.expense,
                balance=data.income - data.expense,
            )
        )
    return points


def average_expense(aggregates: dict[str, PeriodAggregate], selection: PeriodUsageSelection) -> Decimal:
    total = sum((aggregates[key].expense for key in selection.periods_used_for_average), ZERO)
    return (total / selection.periods_for_average_count).quantize(CENT, rounding=ROUND_HALF_UP)


def build_average_category_breakdown(
    categories: dict[Hashable, CategoryAggregate], selection: PeriodUsageSelection
) -> list[CategoryAverage]:
    """Average monthly expense per category, largest first, zeros dropped."""
    averages = []
    for category in categories.values():
        total = sum(
            (category.totals_by_period.get(key, ZERO) for key in selection.periods_used_for_average),
            ZERO,
        )
        value = (total / selection.periods_for_average_count).quantize(CENT, rounding=ROUND_HALF_UP)
        if value > 0:
            averages.append(
                CategoryAverage(
                    id=category.id,
                    name=category.name,
                    value=value,
                    color=category.color,
                    icon=category.icon,
                )
            )
    averages.sort(key=lambda item: item.value, reverse=True)
    return averages
