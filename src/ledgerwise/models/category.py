"""Category and learned category keyword models.

Categories are managed externally and consumed read-only by categorization;
keywords are created by the learning loop and never auto-deleted.
"""
import enum
from uuid import UUID

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledgerwise.models.base import BaseModel


class CategoryType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class Category(BaseModel):
    """Spending or income category."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name_en: Mapped[str | None] = mapped_column(String(100), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(20), nullable=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    type: Mapped[CategoryType] = mapped_column(Enum(CategoryType, name="category_type"), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    keywords: Mapped[list["CategoryKeyword"]] = relationship(
        "CategoryKeyword", back_populates="category", lazy="selectin", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name}, type={self.type})>"


class CategoryKeyword(BaseModel):
    """Keyword rule mapping description text to a category."""

    __tablename__ = "category_keywords"

    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )
    keyword: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    is_exact: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint("category_id", "keyword", name="uq_category_keyword"),
    )

    category: Mapped["Category"] = relationship("Category", back_populates="keywords")

    def __repr__(self) -> str:
        return (
            f"<CategoryKeyword(id={self.id}, keyword={self.keyword}, "
            f"category_id={self.category_id}, is_exact={self.is_exact})>"
        )
