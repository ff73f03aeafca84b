"""Account repository."""
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.models.account import Account
from ledgerwise.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Account)
