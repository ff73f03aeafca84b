"""Transaction repository: lookups, dedup keys and bulk updates."""
from datetime import date
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.models.transaction import Transaction
from ledgerwise.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def get_dedup_rows(self, account_id: UUID) -> list[tuple[date, Any, str, str | None]]:
        """(date, amount, description, reference) for every transaction in an account."""
        result = await self.db.execute(
            select(
                Transaction.date,
                Transaction.amount,
                Transaction.description,
                Transaction.reference,
            ).where(Transaction.account_id == account_id)
        )
        return [tuple(row) for row in result.all()]

    async def get_by_sign(self, expense: bool) -> list[Transaction]:
        """Non-excluded transactions with a negative (expense) or positive amount."""
        condition = Transaction.amount < 0 if expense else Transaction.amount > 0
        result = await self.db.execute(
            select(Transaction).where(condition, Transaction.is_excluded.is_(False))
        )
        return list(result.unique().scalars().all())

    async def get_not_recurring(self) -> list[Transaction]:
        result = await self.db.execute(select(Transaction).where(Transaction.is_recurring.is_(False)))
        return list(result.unique().scalars().all())

    async def get_by_category(self, category_id: UUID | None) -> list[Transaction]:
        condition = (
            Transaction.category_id.is_(None)
            if category_id is None
            else Transaction.category_id == category_id
        )
        result = await self.db.execute(select(Transaction).where(condition))
        return list(result.unique().scalars().all())

    async def get_uncategorized(self, limit: int) -> list[Transaction]:
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.category_id.is_(None), Transaction.is_excluded.is_(False))
            .order_by(Transaction.date.desc())
            .limit(limit)
        )
        return list(result.unique().scalars().all())

    async def get_in_range(self, start_date: date, end_date: date) -> list[Transaction]:
        """Non-excluded transactions dated within [start_date, end_date]."""
        result = await self.db.execute(
            select(Transaction).where(
                Transaction.date >= start_date,
                Transaction.date <= end_date,
                Transaction.is_excluded.is_(False),
            )
        )
        return list(result.unique().scalars().all())

    async def bulk_update(self, ids: Iterable[UUID], values: dict[str, Any], include_excluded: bool = True) -> int:
        """Apply ``values`` to the given ids; returns the number of rows changed."""
        ids = list(dict.fromkeys(ids))
        if not ids:
            return 0
        stmt = update(Transaction).where(Transaction.id.in_(ids))
        if not include_excluded:
            stmt = stmt.where(Transaction.is_excluded.is_(False))
        result = await self.db.execute(
            stmt.values(**values)
        )
        return int(result.rowcount or 0)

    async def get_expenses(
        self,
        account_id: UUID | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[Transaction]:
        """Non-excluded expenses, optionally limited to an account and a half-open date range."""
        stmt = select(Transaction).where(Transaction.amount < 0, Transaction.is_excluded.is_(False))
        if account_id is not None:
            stmt = stmt.where(Transaction.account_id == account_id)
        if start_date is not None:
            stmt = stmt.where(Transaction.date >= start_date)
        if end_date is not None:
            stmt = stmt.where(Transaction.date < end_date)
        result = await self.db.execute(stmt)
        return list(result.unique().scalars().all())

    async def delete_ids(self, ids: Iterable[UUID]) -> int:
        ids = list(dict.fromkeys(ids))
        if not ids:
            return 0
        result = await self.db.execute(delete(Transaction).where(Transaction.id.in_(ids)))
        return int(result.rowcount or 0)
