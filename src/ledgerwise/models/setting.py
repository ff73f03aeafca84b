"""Key/value application settings (e.g. the active period mode)."""
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ledgerwise.models.base import BaseModel


class Setting(BaseModel):
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Setting(key={self.key})>"
