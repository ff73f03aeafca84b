"""Repositories for learned category and recurring keywords."""
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.categorization.keywords import KeywordEntry
from ledgerwise.models.category import CategoryKeyword
from ledgerwise.models.recurring_keyword import RecurringKeyword
from ledgerwise.repositories.base import BaseRepository


class CategoryKeywordRepository(BaseRepository[CategoryKeyword]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, CategoryKeyword)

    async def list_entries(self) -> list[KeywordEntry]:
        """All keyword rules, highest priority first."""
        result = await self.db.execute(
            select(CategoryKeyword).order_by(CategoryKeyword.priority.desc())
        )
        return [
            KeywordEntry(
                keyword=row.keyword,
                category_id=row.category_id,
                is_exact=row.is_exact,
                priority=row.priority,
            )
            for row in result.scalars().all()
        ]

    async def exists(self, keyword: str, category_id: UUID) -> bool:
        result = await self.db.execute(
            select(CategoryKeyword.id).where(
                CategoryKeyword.keyword == keyword,
                CategoryKeyword.category_id == category_id,
            )
        )
        return result.first() is not None

    async def add_keyword(
        self, keyword: str, category_id: UUID, is_exact: bool = False, priority: int = 0
    ) -> bool:
        """Insert a rule unless the (keyword, category) pair already exists.

        Returns True if a row was added.
        """
        if await self.exists(keyword, category_id):
            return False
        await self.add(
            CategoryKeyword(
                keyword=keyword, category_id=category_id, is_exact=is_exact, priority=priority
            )
        )
        return True


class RecurringKeywordRepository(BaseRepository[RecurringKeyword]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, RecurringKeyword)

    async def list_keywords(self) -> list[str]:
        result = await self.db.execute(select(RecurringKeyword.keyword))
        return [row[0] for row in result.all()]

    async def upsert(self, keyword: str) -> bool:
        """Insert the keyword if missing. Returns True if a row was added."""
        result = await self.db.execute(
            select(RecurringKeyword.id).where(RecurringKeyword.keyword == keyword)
        )
        if result.first() is not None:
            return False
        await self.add(RecurringKeyword(keyword=keyword))
        return True

    async def remove(self, keyword: str) -> bool:
        """Delete the keyword if present. Returns True if a row was removed."""
        result = await self.db.execute(
            delete(RecurringKeyword).where(RecurringKeyword.keyword == keyword)
        )
        return bool(result.rowcount)
