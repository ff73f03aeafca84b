"""Account model: one bank account or credit card a statement belongs to."""
from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledgerwise.core.institutions import Institution
from ledgerwise.models.base import BaseModel


class Account(BaseModel):
    """Bank account or credit card."""

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    institution: Mapped[Institution] = mapped_column(
        Enum(Institution, name="institution"), nullable=False, index=True
    )
    card_number: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Rely on DB-level ON DELETE CASCADE; prevent SQLAlchemy from NULLing FKs on delete.
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction", back_populates="account", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, institution={self.institution}, name={self.name})>"
