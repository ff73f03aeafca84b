"""Removal of bank-side credit-card bill charges."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.categorization.card_bills import month_bounds, select_consolidated_card_charges
from ledgerwise.core.exceptions import InvalidInputError
from ledgerwise.repositories.transaction import TransactionRepository
from ledgerwise.schemas.transaction import BulkDeleteResponse

logger = logging.getLogger(__name__)


class CleanupService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.transaction_repo = TransactionRepository(db)

    async def delete_consolidated_card_charges(
        self, account_id: UUID | None = None, month: str | None = None
    ) -> BulkDeleteResponse:
        """Delete bank-account expenses that pay a credit card's monthly bill.

        Blank ``month`` means every month; a malformed one raises TXN_003.
        """
        start = end = None
        if month and month.strip():
            bounds = month_bounds(month)
            if bounds is None:
                raise InvalidInputError("TXN_003", {"month": month})
            start, end = bounds

        candidates = await self.transaction_repo.get_expenses(account_id, start, end)
        ids = select_consolidated_card_charges(candidates)
        if not ids:
            return BulkDeleteResponse(deleted=0, deleted_ids=[], scanned=len(candidates))

        deleted = await self.transaction_repo.delete_ids(ids)
        await self.db.commit()

        logger.info(
            "Deleted consolidated card charges",
            extra={"count": deleted, "account_id": str(account_id) if account_id else None},
        )
        return BulkDeleteResponse(deleted=deleted, deleted_ids=ids, scanned=len(candidates))
