"""Unit tests for SettingsService."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from ledgerwise.periods.definitions import PeriodMode
from ledgerwise.services.settings import PERIOD_MODE_SETTING_KEY, SettingsService


@pytest.fixture
def service(mock_db):
    service = SettingsService(mock_db)
    service.repo = AsyncMock()
    return service


@pytest.mark.asyncio
async def test_stored_mode(service):
    service.repo.get_value.return_value = "billing"
    assert await service.get_period_mode() is PeriodMode.BILLING
    service.repo.get_value.assert_awaited_once_with(PERIOD_MODE_SETTING_KEY)


@pytest.mark.asyncio
async def test_missing_or_garbage_mode_is_calendar(service):
    service.repo.get_value.return_value = None
    assert await service.get_period_mode() is PeriodMode.CALENDAR

    service.repo.get_value.return_value = "fortnightly"
    assert await service.get_period_mode() is PeriodMode.CALENDAR


@pytest.mark.asyncio
async def test_read_failure_falls_back_to_calendar(service):
    service.repo.get_value.side_effect = OperationalError("SELECT", {}, Exception("down"))
    assert await service.get_period_mode() is PeriodMode.CALENDAR


@pytest.mark.asyncio
async def test_set_period_mode_normalizes(service, mock_db):
    assert await service.set_period_mode(" Billing ") is PeriodMode.BILLING
    service.repo.set_value.assert_awaited_once_with(PERIOD_MODE_SETTING_KEY, "billing")
    mock_db.commit.assert_awaited_once()

    assert await service.set_period_mode("weekly") is PeriodMode.CALENDAR
