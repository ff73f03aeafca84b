"""Persisted user settings."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.config import settings
from ledgerwise.periods.definitions import PeriodMode, normalize_period_mode
from ledgerwise.repositories.setting import SettingRepository

logger = logging.getLogger(__name__)

PERIOD_MODE_SETTING_KEY = "period_mode"


class SettingsService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = SettingRepository(db)

    async def get_period_mode(self) -> PeriodMode:
        """Active period mode; falls back to the configured default on any failure."""
        try:
            stored = await self.repo.get_value(PERIOD_MODE_SETTING_KEY)
        except SQLAlchemyError as exc:
            logger.warning("Could not read period mode", extra={"error_type": type(exc).__name__})
            stored = None
        return normalize_period_mode(stored or settings.default_period_mode)

    async def set_period_mode(self, value: str | None) -> PeriodMode:
        mode = normalize_period_mode(value)
        await self.repo.set_value(PERIOD_MODE_SETTING_KEY, mode.value)
        await self.db.commit()
        return mode
