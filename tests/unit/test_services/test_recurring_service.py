"""Unit tests for RecurringService."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from ledgerwise.categorization.recurring import RecurringKeywordSet
from ledgerwise.core.exceptions import InvalidInputError, NotFoundError
from ledgerwise.services.keyword_state import KeywordState
from ledgerwise.services.recurring import RecurringService

STREAMING = uuid4()


def _count_ids(ids, values, include_excluded=True):
    return len(list(ids))


@pytest.fixture
def state():
    state = KeywordState(recurring=RecurringKeywordSet([]))
    state.reload_recurring = AsyncMock()
    return state


@pytest.fixture
def service(mock_db, state):
    service = RecurringService(mock_db, state)
    service.transaction_repo = AsyncMock()
    service.transaction_repo.bulk_update.side_effect = _count_ids
    service.keyword_repo = AsyncMock()
    service.keyword_repo.upsert.return_value = True
    service.keyword_repo.remove.return_value = True
    return service


class TestUpdateRecurring:
    @pytest.mark.asyncio
    async def test_learning_cascades_to_matching_descriptions(self, service, state, mock_db, make_txn):
        source = make_txn("הוראת קבע נטפליקס", "-49.90")
        monthly = make_txn("נטפליקס ישראל", "-49.90")
        unrelated = make_txn("ספוטיפיי", "-19.90")
        service.transaction_repo.get_by_id.return_value = source
        service.transaction_repo.get_not_recurring.return_value = [monthly, unrelated]

        result = await service.update_recurring(source.id, True, learn_from_this=True)

        assert source.is_recurring is True
        assert result.keyword_added == "נטפליקס"
        assert result.updated_similar == 1
        service.keyword_repo.upsert.assert_awaited_once_with("נטפליקס")
        service.transaction_repo.bulk_update.assert_awaited_once_with([monthly.id], {"is_recurring": True})
        mock_db.commit.assert_awaited_once()
        state.reload_recurring.assert_awaited_once_with(mock_db)

    @pytest.mark.asyncio
    async def test_unlearning_does_not_cascade(self, service, state, make_txn):
        source = make_txn("הוראת קבע נטפליקס", is_recurring=True)
        service.transaction_repo.get_by_id.return_value = source

        result = await service.update_recurring(source.id, False, learn_from_this=True)

        assert source.is_recurring is False
        assert result.keyword_removed == "נטפליקס"
        assert result.keyword_added is None
        assert result.updated_similar == 0
        service.keyword_repo.remove.assert_awaited_once_with("נטפליקס")
        service.transaction_repo.get_not_recurring.assert_not_awaited()
        service.transaction_repo.bulk_update.assert_not_awaited()
        state.reload_recurring.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_plain_toggle(self, service, state, make_txn):
        source = make_txn("נטפליקס")
        service.transaction_repo.get_by_id.return_value = source

        result = await service.update_recurring(source.id, True)

        assert result.is_recurring is True
        assert result.updated_similar == result.updated_identical == result.updated_merchant_family == 0
        service.keyword_repo.upsert.assert_not_awaited()
        state.reload_recurring.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_apply_to_identical(self, service, make_txn):
        source = make_txn("Netflix", "-49.90", category_id=STREAMING)
        twin = make_txn("NETFLIX", "-49.90", category_id=STREAMING)
        other = make_txn("Netflix", "-59.90", category_id=STREAMING)
        service.transaction_repo.get_by_id.return_value = source
        service.transaction_repo.get_by_category.return_value = [source, twin, other]

        result = await service.update_recurring(source.id, True, apply_to_identical=True)

        assert result.updated_identical == 1
        service.transaction_repo.get_by_category.assert_awaited_once_with(STREAMING)

    @pytest.mark.asyncio
    async def test_apply_to_merchant_family(self, service, make_txn):
        source = make_txn("SUPER PHARM TLV", "-50", category_id=STREAMING)
        sibling = make_txn("SUPER PHARM HAIFA", "-20", category_id=STREAMING)
        service.transaction_repo.get_by_id.return_value = source
        service.transaction_repo.get_by_sign.return_value = [source, sibling]

        result = await service.update_recurring(source.id, True, apply_to_merchant_family=True)

        assert result.updated_merchant_family == 1
        service.transaction_repo.get_by_sign.assert_awaited_once_with(expense=True)

    @pytest.mark.asyncio
    async def test_unknown_transaction(self, service):
        service.transaction_repo.get_by_id.return_value = None
        with pytest.raises(NotFoundError) as exc_info:
            await service.update_recurring(uuid4(), True)
        assert exc_info.value.error_code == "TXN_001"


class TestBulkSetRecurring:
    @pytest.mark.asyncio
    async def test_updates_non_excluded(self, service, mock_db):
        ids = [uuid4(), uuid4()]

        assert await service.bulk_set_recurring(ids, True) == 2
        service.transaction_repo.bulk_update.assert_awaited_once_with(
            ids, {"is_recurring": True}, include_excluded=False
        )
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_selection(self, service):
        with pytest.raises(InvalidInputError):
            await service.bulk_set_recurring([], False)
