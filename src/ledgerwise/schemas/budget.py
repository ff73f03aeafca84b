"""Variable budget plan schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ledgerwise.periods.definitions import PeriodMode


class BudgetItem(BaseModel):
    category_id: str
    amount: Decimal


class BudgetPlanUpdate(BaseModel):
    period_key: str | None = Field(None, description="YYYY-MM; defaults to the current period")
    items: list[BudgetItem] = Field(default_factory=list)


class BudgetPlanResponse(BaseModel):
    period_mode: PeriodMode
    period_key: str
    updated_at: datetime | None = Field(None, description="Unset when no plan was saved yet")
    items: dict[str, Decimal] = Field(default_factory=dict)
