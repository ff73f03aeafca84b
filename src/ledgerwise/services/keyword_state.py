"""Caller-owned keyword state shared by the categorization services.

The application creates one ``KeywordState`` at startup and hands it to every
service. Services load it lazily on first use and reload the affected table
right after committing a keyword write; nothing invalidates it implicitly.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.categorization.keywords import KeywordCategorizer, KeywordTable
from ledgerwise.categorization.recurring import RecurringKeywordSet
from ledgerwise.repositories.keyword import CategoryKeywordRepository, RecurringKeywordRepository

logger = logging.getLogger(__name__)


class KeywordState:
    def __init__(
        self,
        table: KeywordTable | None = None,
        recurring: RecurringKeywordSet | None = None,
    ):
        self.table = table if table is not None else KeywordTable()
        self.recurring = recurring if recurring is not None else RecurringKeywordSet()
        self.categorizer = KeywordCategorizer(self.table)

    async def ensure_loaded(self, db: AsyncSession) -> None:
        if not self.table.is_loaded:
            await self.reload_categories(db)
        if not self.recurring.is_loaded:
            await self.reload_recurring(db)

    async def reload_categories(self, db: AsyncSession) -> None:
        entries = await CategoryKeywordRepository(db).list_entries()
        self.table.reload(entries)
        logger.info("Category keywords loaded", extra={"count": len(self.table)})

    async def reload_recurring(self, db: AsyncSession) -> None:
        keywords = await RecurringKeywordRepository(db).list_keywords()
        self.recurring.reload(keywords)
        logger.info("Recurring keywords loaded", extra={"count": len(self.recurring)})
