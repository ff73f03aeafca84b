"""Transaction edit endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ledgerwise.api.deps import get_categorization_service, get_cleanup_service, get_recurring_service
from ledgerwise.schemas.transaction import (
    AutoCategorizeResponse,
    BulkCategoryRequest,
    BulkDeleteRequest,
    BulkDeleteResponse,
    BulkRecurringRequest,
    BulkUpdateResponse,
    CategoryUpdateRequest,
    CategoryUpdateResponse,
    RecurringUpdateRequest,
    RecurringUpdateResponse,
)
from ledgerwise.services.categorization import CategorizationService
from ledgerwise.services.cleanup import CleanupService
from ledgerwise.services.recurring import RecurringService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.patch(
    "/bulk-category",
    response_model=BulkUpdateResponse,
    summary="Set one category on many transactions",
)
async def bulk_update_category(
    payload: BulkCategoryRequest,
    service: CategorizationService = Depends(get_categorization_service),
) -> BulkUpdateResponse:
    """Excluded transactions are left untouched."""
    updated = await service.bulk_set_category(payload.transaction_ids, payload.category_id)
    return BulkUpdateResponse(updated_count=updated)


@router.patch(
    "/bulk-recurring",
    response_model=BulkUpdateResponse,
    summary="Set the recurring flag on many transactions",
)
async def bulk_update_recurring(
    payload: BulkRecurringRequest,
    service: RecurringService = Depends(get_recurring_service),
) -> BulkUpdateResponse:
    updated = await service.bulk_set_recurring(payload.transaction_ids, payload.is_recurring)
    return BulkUpdateResponse(updated_count=updated)


@router.post(
    "/bulk-delete",
    response_model=BulkDeleteResponse,
    summary="Delete transactions matching a cleanup mode",
    description="""
    `consolidated_card_charges` removes bank-account expenses that pay a
    credit card's monthly bill, since the card statement already lists the
    purchases behind them. Optionally limited to one account and one month.
    """,
)
async def bulk_delete(
    payload: BulkDeleteRequest,
    service: CleanupService = Depends(get_cleanup_service),
) -> BulkDeleteResponse:
    return await service.delete_consolidated_card_charges(payload.account_id, payload.month)


@router.post(
    "/auto-categorize",
    response_model=AutoCategorizeResponse,
    summary="Categorize uncategorized transactions",
    description="""
    Uncategorized transactions are matched against the keyword table first.
    Whatever remains is sent to the external classifier when one is
    configured; each classifier decision is stored as a new keyword.
    """,
)
async def auto_categorize(
    limit: Annotated[int | None, Query(ge=1, le=1000, description="Maximum transactions to process")] = None,
    service: CategorizationService = Depends(get_categorization_service),
) -> AutoCategorizeResponse:
    return await service.auto_categorize(limit)


@router.patch(
    "/{transaction_id}/category",
    response_model=CategoryUpdateResponse,
    summary="Change a transaction's category",
)
async def update_category(
    transaction_id: UUID,
    payload: CategoryUpdateRequest,
    service: CategorizationService = Depends(get_categorization_service),
) -> CategoryUpdateResponse:
    return await service.update_category(
        transaction_id,
        payload.category_id,
        learn_from_this=payload.learn_from_this,
        apply_to_similar=payload.apply_to_similar,
    )


@router.patch(
    "/{transaction_id}/recurring",
    response_model=RecurringUpdateResponse,
    summary="Change a transaction's recurring flag",
)
async def update_recurring(
    transaction_id: UUID,
    payload: RecurringUpdateRequest,
    service: RecurringService = Depends(get_recurring_service),
) -> RecurringUpdateResponse:
    return await service.update_recurring(
        transaction_id,
        payload.is_recurring,
        learn_from_this=payload.learn_from_this,
        apply_to_identical=payload.apply_to_identical,
        apply_to_merchant_family=payload.apply_to_merchant_family,
    )
