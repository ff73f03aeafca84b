"""Variable budget plans stored in the settings table."""

import logging
from datetime import date, datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.config import settings
from ledgerwise.periods.budgets import (
    BudgetPlanRecord,
    dump_plans,
    load_plans,
    normalize_items,
    parse_budget_period_key,
    plan_storage_key,
    put_plan,
)
from ledgerwise.periods.definitions import PeriodMode, get_period_key
from ledgerwise.repositories.category import CategoryRepository
from ledgerwise.repositories.setting import SettingRepository
from ledgerwise.schemas.budget import BudgetItem, BudgetPlanResponse
from ledgerwise.services.settings import SettingsService

logger = logging.getLogger(__name__)

VARIABLE_BUDGET_SETTING_KEY = "variable_budget_plans_v1"


def _as_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None


class BudgetService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.setting_repo = SettingRepository(db)
        self.category_repo = CategoryRepository(db)
        self.settings_service = SettingsService(db)

    async def _load(self) -> dict[str, BudgetPlanRecord]:
        try:
            raw = await self.setting_repo.get_value(VARIABLE_BUDGET_SETTING_KEY)
        except SQLAlchemyError as exc:
            logger.warning("Could not read budget plans", extra={"error_type": type(exc).__name__})
            return {}
        return load_plans(raw)

    async def _resolve_period(self, period_key: str | None, today: date | None) -> tuple[PeriodMode, str]:
        mode = await self.settings_service.get_period_mode()
        key = parse_budget_period_key(period_key) or get_period_key(
            today or date.today(), mode, settings.billing_cutoff_day
        )
        return mode, key

    async def get_plan(self, period_key: str | None = None, today: date | None = None) -> BudgetPlanResponse:
        """Plan for a period of the active mode; an invalid key means the current period."""
        mode, key = await self._resolve_period(period_key, today)
        record = (await self._load()).get(plan_storage_key(mode, key))
        return BudgetPlanResponse(
            period_mode=mode,
            period_key=key,
            updated_at=record.updated_at if record else None,
            items=record.items if record else {},
        )

    async def save_plan(
        self,
        period_key: str | None,
        items: Sequence[BudgetItem],
        today: date | None = None,
        now: datetime | None = None,
    ) -> BudgetPlanResponse:
        """Replace the plan for a period.

        Items naming an unknown or non-expense category, or with a
        non-positive amount, are dropped. Amounts are capped.
        """
        mode, key = await self._resolve_period(period_key, today)
        normalized = normalize_items((item.category_id, item.amount) for item in items)

        ids = {category_id: _as_uuid(category_id) for category_id in normalized}
        expense_ids = await self.category_repo.get_expense_ids([uuid for uuid in ids.values() if uuid])
        validated = {
            str(ids[category_id]): amount
            for category_id, amount in normalized.items()
            if ids[category_id] in expense_ids
        }

        now = now or datetime.now(timezone.utc)
        plans = put_plan(await self._load(), mode, key, validated, now)
        await self.setting_repo.set_value(VARIABLE_BUDGET_SETTING_KEY, dump_plans(plans))
        await self.db.commit()

        logger.info("Budget plan saved", extra={"period_key": key, "count": len(validated)})
        return BudgetPlanResponse(period_mode=mode, period_key=key, updated_at=now, items=validated)
