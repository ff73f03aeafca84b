"""Import request/response schemas."""

import datetime as dt
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


class ImportRow(BaseModel):
    """One parsed statement line as supplied by a file parser.

    ``date`` and ``amount`` are accepted loosely; a row whose values cannot be
    parsed is reported back instead of failing the whole batch.
    """

    description: str
    date: dt.date | str
    amount: Decimal | str
    reference: str | None = None
    value_date: dt.date | None = None


class ImportRequest(BaseModel):
    rows: list[ImportRow]


class ImportRowResult(BaseModel):
    index: int
    status: Literal["imported", "duplicate", "error"]
    dedup_key: str | None = None
    category_id: UUID | None = None
    confidence: float = 0.0
    is_recurring: bool = False
    error_code: str | None = None
    error_field: str | None = None


class ImportResult(BaseModel):
    account_id: UUID
    total: int
    imported: int
    duplicates: int
    errors: int
    rows: list[ImportRowResult] = Field(default_factory=list)
