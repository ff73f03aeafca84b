"""Transaction edit request/response schemas."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


class CategoryUpdateRequest(BaseModel):
    category_id: UUID | None = Field(description="Category to assign, or null to clear")
    learn_from_this: bool = Field(False, description="Store a keyword for future imports")
    apply_to_similar: bool = Field(True, description="Propagate to same-merchant transactions")


class CategoryUpdateResponse(BaseModel):
    transaction_id: UUID
    category_id: UUID | None
    updated_similar: int = Field(0, description="Other transactions that received the category")
    keyword_added: str | None = None


class RecurringUpdateRequest(BaseModel):
    is_recurring: bool
    learn_from_this: bool = False
    apply_to_identical: bool = False
    apply_to_merchant_family: bool = False


class RecurringUpdateResponse(BaseModel):
    transaction_id: UUID
    is_recurring: bool
    updated_similar: int = Field(0, description="Transactions flagged by the keyword cascade")
    updated_identical: int = 0
    updated_merchant_family: int = 0
    keyword_added: str | None = None
    keyword_removed: str | None = None


class BulkCategoryRequest(BaseModel):
    transaction_ids: list[UUID]
    category_id: UUID | None


class BulkRecurringRequest(BaseModel):
    transaction_ids: list[UUID]
    is_recurring: bool


class BulkUpdateResponse(BaseModel):
    updated_count: int


class AutoCategorizeResponse(BaseModel):
    total: int
    categorized_by_keyword: int
    categorized_by_ai: int
    new_keywords: int


class BulkDeleteRequest(BaseModel):
    mode: Literal["consolidated_card_charges"] = Field(
        description="Cleanup mode; only consolidated card charges are supported"
    )
    account_id: UUID | None = Field(None, description="Limit the scan to one account")
    month: str | None = Field(None, description="Limit the scan to one month (YYYY-MM)")


class BulkDeleteResponse(BaseModel):
    deleted: int
    deleted_ids: list[UUID] = Field(default_factory=list)
    scanned: int
