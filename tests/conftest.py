from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock, Mock
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class FakeTransaction:
    """Stand-in for the ORM Transaction with the attributes services touch."""

    description: str
    amount: Decimal
    id: UUID | None = None
    category_id: Any = None
    is_recurring: bool = False
    is_excluded: bool = False
    is_auto_categorized: bool = False

    def __post_init__(self):
        if self.id is None:
            self.id = uuid4()
        self.amount = Decimal(str(self.amount))


@pytest.fixture
def make_txn():
    """Factory for transactions: ``make_txn("שופרסל", "-120.50", category_id=...)``."""

    def _make(description: str, amount: str | Decimal = "-10.00", **kwargs) -> FakeTransaction:
        return FakeTransaction(description=description, amount=Decimal(str(amount)), **kwargs)

    return _make


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock(spec=AsyncSession)
    db.add = Mock()
    db.flush = AsyncMock()
    execute_result = MagicMock()
    scalars_result = MagicMock()
    scalars_result.all.return_value = []
    execute_result.scalars.return_value = scalars_result
    execute_result.all.return_value = []
    db.execute = AsyncMock(return_value=execute_result)
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db
