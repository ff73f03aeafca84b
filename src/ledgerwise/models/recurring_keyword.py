"""Learned recurring-charge keywords."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ledgerwise.models.base import BaseModel


class RecurringKeyword(BaseModel):
    """Any description containing ``keyword`` is a recurring charge."""

    __tablename__ = "recurring_keywords"

    keyword: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<RecurringKeyword(id={self.id}, keyword={self.keyword})>"
