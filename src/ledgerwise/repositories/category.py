"""Category repository (read-only from the core's point of view)."""
from typing import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.models.category import Category, CategoryType
from ledgerwise.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def list_ordered(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.sort_order, Category.name))
        return list(result.unique().scalars().all())

    async def get_expense_ids(self, ids: Iterable[UUID]) -> set[UUID]:
        """Subset of ``ids`` that name existing expense categories."""
        ids = list(dict.fromkeys(ids))
        if not ids:
            return set()
        result = await self.db.execute(
            select(Category.id).where(Category.id.in_(ids), Category.type == CategoryType.EXPENSE)
        )
        return set(result.scalars().all())
