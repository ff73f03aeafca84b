"""Key/value settings repository."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.models.setting import Setting
from ledgerwise.repositories.base import BaseRepository


class SettingRepository(BaseRepository[Setting]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Setting)

    async def get_value(self, key: str) -> str | None:
        result = await self.db.execute(select(Setting.value).where(Setting.key == key))
        row = result.first()
        return row[0] if row else None

    async def set_value(self, key: str, value: str) -> None:
        result = await self.db.execute(select(Setting).where(Setting.key == key))
        existing = result.scalar_one_or_none()
        if existing:
            existing.value = value
            await self.db.flush()
        else:
            await self.add(Setting(key=key, value=value))
