"""Variable budget plan endpoints."""

from fastapi import APIRouter, Depends, Query

from ledgerwise.api.deps import get_budget_service
from ledgerwise.schemas.budget import BudgetPlanResponse, BudgetPlanUpdate
from ledgerwise.services.budgets import BudgetService

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get("/variable", response_model=BudgetPlanResponse)
async def get_variable_budget(
    period_key: str | None = Query(None, description="YYYY-MM; defaults to the current period"),
    service: BudgetService = Depends(get_budget_service),
) -> BudgetPlanResponse:
    return await service.get_plan(period_key)


@router.put("/variable", response_model=BudgetPlanResponse)
async def save_variable_budget(
    payload: BudgetPlanUpdate,
    service: BudgetService = Depends(get_budget_service),
) -> BudgetPlanResponse:
    """Replace the plan for one period of the active period mode."""
    return await service.save_plan(payload.period_key, payload.items)
