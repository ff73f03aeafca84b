"""Unit tests for statement import planning and ImportService."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from ledgerwise.categorization.keywords import KeywordCategorizer, KeywordEntry, KeywordTable
from ledgerwise.categorization.recurring import RecurringKeywordSet
from ledgerwise.core.exceptions import InvalidInputError, NotFoundError
from ledgerwise.models.transaction import Transaction
from ledgerwise.schemas.importing import ImportRow
from ledgerwise.services.importer import ImportService, parse_amount, plan_import
from ledgerwise.services.keyword_state import KeywordState

FOOD = uuid4()
ACCOUNT_ID = uuid4()


@pytest.fixture
def table():
    return KeywordTable([KeywordEntry("שופרסל", FOOD)])


@pytest.fixture
def recurring():
    return RecurringKeywordSet(["נטפליקס"])


@pytest.fixture
def state(table, recurring):
    return KeywordState(table, recurring)


class TestParseAmount:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("-120.50", Decimal("-120.50")),
            ("1,234.5", Decimal("1234.50")),
            (Decimal("7"), Decimal("7.00")),
            (-0.1, Decimal("-0.10")),
            (15, Decimal("15.00")),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "inf", None])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_amount(value)

    @pytest.mark.parametrize("value", ["123456789012.34", "-10000000000", "9999999999.999"])
    def test_rejects_amounts_too_large_to_store(self, value):
        with pytest.raises(ValueError):
            parse_amount(value)

    def test_largest_storable_amount(self):
        assert parse_amount("-9999999999.99") == Decimal("-9999999999.99")


class TestPlanImport:
    def test_categorizes_and_flags_new_rows(self, table, recurring):
        rows = [
            ImportRow(description="שופרסל דיל חיפה", date="2024-01-05", amount="-120.50"),
            ImportRow(description="הוראת קבע נטפליקס", date=date(2024, 1, 6), amount="-49.90"),
        ]
        plan = plan_import(rows, [], KeywordCategorizer(table), recurring)

        assert [o.status for o in plan.outcomes] == ["imported", "imported"]
        first, second = plan.outcomes
        assert first.category_id == FOOD
        assert 0 < first.confidence <= 0.95
        assert first.is_recurring is False
        assert second.category_id is None
        assert second.is_recurring is True
        parsed, _ = plan.accepted[0]
        assert parsed.amount == Decimal("-120.50")
        assert parsed.date == date(2024, 1, 5)

    def test_duplicates_against_stored_rows(self, table, recurring):
        existing = [
            (date(2024, 1, 1), Decimal("-10.00"), "סונול", None),
            (date(2024, 1, 2), Decimal("-5.00"), "פז", "VCH-1"),
        ]
        rows = [
            ImportRow(description="סונול", date="2024-01-01", amount="-10"),
            ImportRow(description="פז אחר", date="2024-01-03", amount="-7", reference="VCH-1"),
            ImportRow(description="סונול", date="2024-01-01", amount="-10.01"),
        ]
        plan = plan_import(rows, existing, KeywordCategorizer(table), recurring)

        assert [o.status for o in plan.outcomes] == ["duplicate", "duplicate", "imported"]
        assert plan.duplicates == 2
        assert plan.outcomes[0].dedup_key == "2024-01-01_-10.00_סונול"
        assert plan.outcomes[1].dedup_key == "VCH-1"

    def test_duplicates_within_one_batch(self, table, recurring):
        rows = [
            ImportRow(description="סונול", date="2024-01-01", amount="-10"),
            ImportRow(description="סונול", date="2024-01-01", amount="-10.00"),
            ImportRow(description="a", date="2024-01-02", amount="-1", reference="R1"),
            ImportRow(description="b", date="2024-01-03", amount="-2", reference="R1"),
        ]
        plan = plan_import(rows, [], KeywordCategorizer(table), recurring)

        assert [o.status for o in plan.outcomes] == ["imported", "duplicate", "imported", "duplicate"]
        assert len(plan.accepted) == 2

    def test_bad_rows_do_not_abort_the_batch(self, table, recurring):
        rows = [
            ImportRow(description="סונול", date="2024-01-01", amount="abc"),
            ImportRow(description="   ", date="2024-01-01", amount="-1"),
            ImportRow(description="פז", date="2024-13-45", amount="-1"),
            ImportRow(description="שופרסל", date="2024-01-01", amount="-1"),
        ]
        plan = plan_import(rows, [], KeywordCategorizer(table), recurring)

        assert [o.status for o in plan.outcomes] == ["error", "error", "error", "imported"]
        assert [o.error_field for o in plan.outcomes[:3]] == ["amount", "description", "date"]
        assert all(o.error_code == "IMP_001" for o in plan.outcomes[:3])
        assert [e.row_index for e in plan.errors] == [0, 1, 2]

    def test_oversized_amount_fails_only_its_row(self, table, recurring):
        rows = [
            ImportRow(description="העברה", date="2024-01-01", amount="123456789012.34"),
            ImportRow(description="שופרסל", date="2024-01-02", amount="-10"),
        ]
        plan = plan_import(rows, [], KeywordCategorizer(table), recurring)

        assert [o.status for o in plan.outcomes] == ["error", "imported"]
        assert plan.outcomes[0].error_code == "IMP_001"
        assert plan.outcomes[0].error_field == "amount"
        assert len(plan.accepted) == 1


class TestImportService:
    @pytest.fixture
    def service(self, mock_db, state):
        service = ImportService(mock_db, state)
        service.account_repo = AsyncMock()
        service.account_repo.get_by_id.return_value = SimpleNamespace(id=ACCOUNT_ID)
        service.transaction_repo = AsyncMock()
        service.transaction_repo.get_dedup_rows.return_value = [
            (date(2024, 1, 1), Decimal("-10.00"), "סונול", None)
        ]
        return service

    @pytest.mark.asyncio
    async def test_import_rows(self, service, mock_db):
        rows = [
            ImportRow(description="סונול", date="2024-01-01", amount="-10"),
            ImportRow(description="שופרסל דיל", date="2024-01-02", amount="-55.20", reference="A1"),
            ImportRow(description="הוראת קבע נטפליקס", date="2024-01-03", amount="-49.90"),
            ImportRow(description="פז", date="bad", amount="-1"),
        ]

        result = await service.import_rows(ACCOUNT_ID, rows)

        assert (result.total, result.imported, result.duplicates, result.errors) == (4, 2, 1, 1)
        added = [call.args[0] for call in mock_db.add.call_args_list]
        assert all(isinstance(txn, Transaction) for txn in added)
        assert [txn.description for txn in added] == ["שופרסל דיל", "הוראת קבע נטפליקס"]
        assert added[0].category_id == FOOD
        assert added[0].is_auto_categorized is True
        assert added[0].reference == "A1"
        assert added[1].category_id is None
        assert added[1].is_auto_categorized is False
        assert added[1].is_recurring is True
        assert added[1].account_id == ACCOUNT_ID
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_batch(self, service):
        with pytest.raises(InvalidInputError) as exc_info:
            await service.import_rows(ACCOUNT_ID, [])
        assert exc_info.value.error_code == "IMP_002"

    @pytest.mark.asyncio
    async def test_unknown_account(self, service):
        service.account_repo.get_by_id.return_value = None
        with pytest.raises(NotFoundError) as exc_info:
            await service.import_rows(ACCOUNT_ID, [ImportRow(description="x", date="2024-01-01", amount="1")])
        assert exc_info.value.error_code == "IMP_003"
        assert exc_info.value.http_status == 404

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, service, mock_db):
        mock_db.commit.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError):
            await service.import_rows(ACCOUNT_ID, [ImportRow(description="x", date="2024-01-01", amount="1")])
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_loads_keywords_on_first_use(self, mock_db):
        state = KeywordState()
        state.reload_categories = AsyncMock()
        state.reload_recurring = AsyncMock()
        service = ImportService(mock_db, state)
        service.account_repo = AsyncMock()
        service.transaction_repo = AsyncMock()
        service.transaction_repo.get_dedup_rows.return_value = []

        await service.import_rows(ACCOUNT_ID, [ImportRow(description="x", date="2024-01-01", amount="1")])

        state.reload_categories.assert_awaited_once_with(mock_db)
        state.reload_recurring.assert_awaited_once_with(mock_db)
