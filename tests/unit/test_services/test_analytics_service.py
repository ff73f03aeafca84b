"""Unit tests for analytics summarization and AnalyticsService."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from ledgerwise.core.institutions import Institution
from ledgerwise.periods.aggregation import AnalyticsTransaction, CategoryRef
from ledgerwise.periods.definitions import PeriodMode, build_periods
from ledgerwise.services.analytics import AnalyticsService, summarize, to_analytics_transaction

FOOD = CategoryRef(id="food", name="מזון", color="#22aa22", icon="🛒")


def _tx(day, amount, institution="BANK_LEUMI", category=FOOD):
    return AnalyticsTransaction(date=day, amount=Decimal(amount), category=category, institution=institution)


class TestSummarize:
    def test_current_period_and_averages(self):
        periods = build_periods(PeriodMode.CALENDAR, date(2024, 3, 15), 3)
        transactions = [
            _tx(date(2024, 1, 5), "-100"),
            _tx(date(2024, 2, 5), "-200"),
            _tx(date(2024, 2, 6), "-40", institution="ISRACARD"),
            _tx(date(2024, 3, 5), "-300"),
            _tx(date(2024, 3, 6), "-60", institution="ISRACARD"),
            _tx(date(2024, 3, 1), "5000", category=None),
        ]

        response = summarize(transactions, periods, PeriodMode.CALENDAR, 10)

        assert response.period_mode is PeriodMode.CALENDAR
        assert [p.key for p in response.periods] == ["2024-01", "2024-02", "2024-03"]
        assert response.summary.current_income == Decimal("5000")
        assert response.summary.current_expense == Decimal("360")
        assert response.summary.current_balance == Decimal("4640")
        assert response.summary.average_expense == Decimal("300.00")
        assert response.period_usage.periods_used_for_average == ["2024-02", "2024-03"]
        assert [(c.name, c.value) for c in response.category_breakdown] == [("מזון", Decimal("300.00"))]
        assert response.total_transactions == 6

    def test_no_transactions(self):
        periods = build_periods(PeriodMode.BILLING, date(2024, 3, 15), 2)

        response = summarize([], periods, PeriodMode.BILLING, 10)

        assert response.summary.average_expense == Decimal("0.00")
        assert response.period_usage.periods_for_average_count == 1
        assert response.category_breakdown == []
        assert response.total_transactions == 0


def test_to_analytics_transaction():
    category_id = uuid4()
    row = SimpleNamespace(
        date=date(2024, 1, 1),
        amount=Decimal("-12.30"),
        category=SimpleNamespace(id=category_id, name="מזון", color=None, icon=None),
        account=SimpleNamespace(institution=Institution.ISRACARD),
        is_excluded=False,
    )

    converted = to_analytics_transaction(row)

    assert converted.institution == "ISRACARD"
    assert converted.category == CategoryRef(id=category_id, name="מזון")
    assert converted.amount == Decimal("-12.30")


class TestAnalyticsService:
    @pytest.mark.asyncio
    async def test_get_analytics_uses_stored_mode(self, mock_db):
        service = AnalyticsService(mock_db)
        service.settings_service = AsyncMock()
        service.settings_service.get_period_mode.return_value = PeriodMode.BILLING
        service.transaction_repo = AsyncMock()
        service.transaction_repo.get_in_range.return_value = [
            SimpleNamespace(
                date=date(2024, 1, 5),
                amount=Decimal("-80"),
                category=None,
                account=SimpleNamespace(institution=Institution.BANK_HAPOALIM),
                is_excluded=False,
            )
        ]

        response = await service.get_analytics(count=2, now=date(2024, 1, 15))

        assert response.period_mode is PeriodMode.BILLING
        assert [p.key for p in response.periods] == ["2023-12", "2024-01"]
        service.transaction_repo.get_in_range.assert_awaited_once_with(date(2023, 12, 10), date(2024, 2, 9))
        assert response.trends[0].expense == Decimal("80")
        assert response.summary.current_expense == Decimal("0")
