"""Recurring-charge toggles and the recurring keyword learning loop."""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.categorization.propagation import (
    learnable_keyword,
    select_identical,
    select_merchant_family,
    select_recurring_cascade,
)
from ledgerwise.core.exceptions import InvalidInputError, NotFoundError
from ledgerwise.repositories.keyword import RecurringKeywordRepository
from ledgerwise.repositories.transaction import TransactionRepository
from ledgerwise.schemas.transaction import RecurringUpdateResponse
from ledgerwise.services.keyword_state import KeywordState

logger = logging.getLogger(__name__)


class RecurringService:
    def __init__(self, db: AsyncSession, state: KeywordState):
        self.db = db
        self.state = state
        self.transaction_repo = TransactionRepository(db)
        self.keyword_repo = RecurringKeywordRepository(db)

    async def update_recurring(
        self,
        transaction_id: UUID,
        is_recurring: bool,
        learn_from_this: bool = False,
        apply_to_identical: bool = False,
        apply_to_merchant_family: bool = False,
    ) -> RecurringUpdateResponse:
        """Set the recurring flag on one transaction.

        Learning with ``is_recurring=True`` stores the description's signature
        and flags every other transaction containing it. Learning with
        ``is_recurring=False`` only forgets the keyword: transactions flagged
        by earlier cascades keep their flag.
        """
        txn = await self.transaction_repo.get_by_id(transaction_id)
        if txn is None:
            raise NotFoundError("TXN_001", {"transaction_id": str(transaction_id)})

        txn.is_recurring = is_recurring

        updated_identical = 0
        if apply_to_identical:
            pool = await self.transaction_repo.get_by_category(txn.category_id)
            updated_identical = await self.transaction_repo.bulk_update(
                select_identical(txn, pool, is_recurring), {"is_recurring": is_recurring}
            )

        updated_family = 0
        if apply_to_merchant_family:
            pool = await self.transaction_repo.get_by_sign(expense=txn.amount < 0)
            updated_family = await self.transaction_repo.bulk_update(
                select_merchant_family(txn, pool, is_recurring), {"is_recurring": is_recurring}
            )

        updated_similar = 0
        keyword_added = keyword_removed = None
        keyword = learnable_keyword(txn.description) if learn_from_this else None
        if keyword and is_recurring:
            await self.keyword_repo.upsert(keyword)
            keyword_added = keyword
            pool = await self.transaction_repo.get_not_recurring()
            updated_similar = await self.transaction_repo.bulk_update(
                select_recurring_cascade(txn, pool, keyword), {"is_recurring": True}
            )
        elif keyword:
            if await self.keyword_repo.remove(keyword):
                keyword_removed = keyword

        await self.db.commit()
        if keyword_added or keyword_removed:
            await self.state.reload_recurring(self.db)

        logger.info(
            "Recurring flag updated",
            extra={"transaction_id": str(txn.id), "updated_count": updated_similar, "keyword": keyword},
        )
        return RecurringUpdateResponse(
            transaction_id=txn.id,
            is_recurring=is_recurring,
            updated_similar=updated_similar,
            updated_identical=updated_identical,
            updated_merchant_family=updated_family,
            keyword_added=keyword_added,
            keyword_removed=keyword_removed,
        )

    async def bulk_set_recurring(self, transaction_ids: Sequence[UUID], is_recurring: bool) -> int:
        ids = list(dict.fromkeys(transaction_ids))
        if not ids:
            raise InvalidInputError("TXN_002")
        updated = await self.transaction_repo.bulk_update(
            ids, {"is_recurring": is_recurring}, include_excluded=False
        )
        await self.db.commit()
        return updated
