"""Period analytics endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ledgerwise.api.deps import get_analytics_service
from ledgerwise.schemas.analytics import AnalyticsResponse
from ledgerwise.services.analytics import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get(
    "",
    response_model=AnalyticsResponse,
    summary="Income, expense and category averages per period",
)
async def get_analytics(
    periods: Annotated[int | None, Query(ge=1, le=36, description="Number of periods, newest last")] = None,
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsResponse:
    return await service.get_analytics(periods)
