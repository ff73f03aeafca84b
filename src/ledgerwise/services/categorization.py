"""Manual category corrections, propagation and auto-categorization."""

import logging
from dataclasses import dataclass
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.categorization.ai import AIClassifier, resolve_category, resolve_description
from ledgerwise.categorization.propagation import learnable_keyword, select_similar_for_category
from ledgerwise.config import settings
from ledgerwise.core.exceptions import InvalidInputError, NotFoundError
from ledgerwise.models.transaction import Transaction
from ledgerwise.repositories.category import CategoryRepository
from ledgerwise.repositories.keyword import CategoryKeywordRepository
from ledgerwise.repositories.transaction import TransactionRepository
from ledgerwise.schemas.transaction import AutoCategorizeResponse, CategoryUpdateResponse
from ledgerwise.services.keyword_state import KeywordState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Assignment:
    transaction: Transaction
    category_id: UUID
    by_ai: bool


class CategorizationService:
    """Applies user category decisions and learns keywords from them."""

    def __init__(
        self,
        db: AsyncSession,
        state: KeywordState,
        classifier: AIClassifier | None = None,
    ):
        self.db = db
        self.state = state
        self.classifier = classifier
        self.transaction_repo = TransactionRepository(db)
        self.category_repo = CategoryRepository(db)
        self.keyword_repo = CategoryKeywordRepository(db)

    async def _get_transaction(self, transaction_id: UUID) -> Transaction:
        txn = await self.transaction_repo.get_by_id(transaction_id)
        if txn is None:
            raise NotFoundError("TXN_001", {"transaction_id": str(transaction_id)})
        return txn

    async def _check_category(self, category_id: UUID | None) -> None:
        if category_id is not None and await self.category_repo.get_by_id(category_id) is None:
            raise NotFoundError("CAT_001", {"category_id": str(category_id)})

    async def update_category(
        self,
        transaction_id: UUID,
        category_id: UUID | None,
        learn_from_this: bool = False,
        apply_to_similar: bool = True,
    ) -> CategoryUpdateResponse:
        """Assign a category to one transaction.

        With ``apply_to_similar`` the category is copied to every other
        non-excluded, same-sign transaction of the same merchant. With
        ``learn_from_this`` the description's signature is stored as a
        keyword so future imports pick the category automatically.
        """
        if learn_from_this and category_id is None:
            raise InvalidInputError("CAT_002", {"transaction_id": str(transaction_id)})
        txn = await self._get_transaction(transaction_id)
        await self._check_category(category_id)

        txn.category_id = category_id
        txn.is_auto_categorized = False

        updated_similar = 0
        if apply_to_similar:
            pool = await self.transaction_repo.get_by_sign(expense=txn.amount < 0)
            ids = select_similar_for_category(txn, pool, category_id)
            updated_similar = await self.transaction_repo.bulk_update(
                ids, {"category_id": category_id, "is_auto_categorized": False}
            )

        keyword_added = None
        if learn_from_this:
            keyword = learnable_keyword(txn.description)
            if keyword and await self.keyword_repo.add_keyword(keyword, category_id):
                keyword_added = keyword

        await self.db.commit()
        if keyword_added:
            await self.state.reload_categories(self.db)

        logger.info(
            "Category updated",
            extra={"transaction_id": str(txn.id), "updated_count": updated_similar, "keyword": keyword_added},
        )
        return CategoryUpdateResponse(
            transaction_id=txn.id,
            category_id=category_id,
            updated_similar=updated_similar,
            keyword_added=keyword_added,
        )

    async def bulk_set_category(self, transaction_ids: Sequence[UUID], category_id: UUID | None) -> int:
        ids = list(dict.fromkeys(transaction_ids))
        if not ids:
            raise InvalidInputError("TXN_002")
        await self._check_category(category_id)

        updated = await self.transaction_repo.bulk_update(
            ids,
            {"category_id": category_id, "is_auto_categorized": False},
            include_excluded=False,
        )
        await self.db.commit()
        return updated

    async def auto_categorize(self, limit: int | None = None) -> AutoCategorizeResponse:
        """Categorize uncategorized transactions: keyword table first, AI classifier second.

        Every AI decision teaches a non-exact, priority-0 keyword so the next
        import of the same merchant no longer needs the classifier.
        """
        await self.state.ensure_loaded(self.db)
        pending = await self.transaction_repo.get_uncategorized(limit or settings.ai_max_batch)
        if not pending:
            return AutoCategorizeResponse(total=0, categorized_by_keyword=0, categorized_by_ai=0, new_keywords=0)

        assignments: list[_Assignment] = []
        remaining: list[Transaction] = []
        for txn in pending:
            result = self.state.categorizer.categorize(txn.description)
            if result is None:
                remaining.append(txn)
            else:
                assignments.append(_Assignment(txn, result.category_id, by_ai=False))

        if remaining and self.classifier is not None:
            categories = await self.category_repo.list_ordered()
            descriptions = list(dict.fromkeys(txn.description for txn in remaining))
            mapping = await self.classifier.classify(descriptions, [c.name for c in categories])
            for txn in remaining:
                category = resolve_category(resolve_description(mapping, txn.description), categories)
                if category is not None:
                    assignments.append(_Assignment(txn, category.id, by_ai=True))

        learned: dict[tuple[str, UUID], None] = {}
        for assignment in assignments:
            assignment.transaction.category_id = assignment.category_id
            assignment.transaction.is_auto_categorized = True
            if assignment.by_ai:
                keyword = learnable_keyword(assignment.transaction.description)
                if keyword:
                    learned.setdefault((keyword, assignment.category_id), None)

        new_keywords = 0
        for keyword, category_id in learned:
            if await self.keyword_repo.add_keyword(keyword, category_id):
                new_keywords += 1

        await self.db.commit()
        if new_keywords:
            await self.state.reload_categories(self.db)

        by_ai = sum(1 for a in assignments if a.by_ai)
        logger.info("Auto-categorize finished", extra={"count": len(assignments), "updated_count": by_ai})
        return AutoCategorizeResponse(
            total=len(pending),
            categorized_by_keyword=len(assignments) - by_ai,
            categorized_by_ai=by_ai,
            new_keywords=new_keywords,
        )
