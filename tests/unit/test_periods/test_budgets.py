import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from ledgerwise.periods.budgets import (
    MAX_AMOUNT,
    MAX_PLAN_COUNT,
    MAX_PLAN_ITEM_COUNT,
    BudgetPlanRecord,
    dump_plans,
    load_plans,
    normalize_amount,
    normalize_category_id,
    normalize_items,
    parse_budget_period_key,
    plan_storage_key,
    put_plan,
)
from ledgerwise.periods.definitions import PeriodMode

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


class TestNormalization:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("250", Decimal("250.00")),
            (99.995, Decimal("100.00")),
            (Decimal("0.01"), Decimal("0.01")),
            ("5000000", MAX_AMOUNT),
        ],
    )
    def test_amounts(self, value, expected):
        assert normalize_amount(value) == expected

    @pytest.mark.parametrize("value", [0, "-5", "abc", None, True, "NaN", "inf"])
    def test_rejected_amounts(self, value):
        assert normalize_amount(value) is None

    def test_category_ids(self):
        assert normalize_category_id("  food ") == "food"
        assert normalize_category_id("") is None
        assert normalize_category_id("x" * 101) is None
        assert normalize_category_id(42) is None

    def test_items_drop_invalid_pairs_and_cap_count(self):
        assert normalize_items({"food": "100", " ": "5", "fun": "-1"}) == {"food": Decimal("100.00")}

        many = {f"cat-{i}": "10" for i in range(MAX_PLAN_ITEM_COUNT + 20)}
        assert len(normalize_items(many)) == MAX_PLAN_ITEM_COUNT

    @pytest.mark.parametrize(
        "value, expected",
        [("2024-03", "2024-03"), (" 2024-12 ", "2024-12"), ("2024-13", None), ("2024-3", None), (None, None)],
    )
    def test_period_keys(self, value, expected):
        assert parse_budget_period_key(value) == expected


def test_storage_key_includes_mode():
    assert plan_storage_key(PeriodMode.BILLING, "2024-03") == "billing:2024-03"
    assert plan_storage_key(PeriodMode.CALENDAR, "2024-03") == "calendar:2024-03"


class TestStore:
    def test_round_trip(self):
        plans = put_plan({}, PeriodMode.CALENDAR, "2024-03", {"food": Decimal("1200.50")}, NOW)

        loaded = load_plans(dump_plans(plans), now=NOW)

        assert loaded == {"calendar:2024-03": BudgetPlanRecord(NOW, {"food": Decimal("1200.50")})}

    @pytest.mark.parametrize("raw", [None, "", "not json", "[]", '{"plans": []}'])
    def test_unreadable_documents_are_empty(self, raw):
        assert load_plans(raw) == {}

    def test_invalid_entries_are_dropped(self):
        raw = json.dumps(
            {
                "plans": {
                    "weekly:2024-03": {"items": {"food": 1}},
                    "calendar:2024-13": {"items": {"food": 1}},
                    "calendar:2024-02": {"items": "oops"},
                    "billing:2024-02": {"updated_at": "garbage", "items": {"food": 10, "fun": -1}},
                }
            }
        )

        loaded = load_plans(raw, now=NOW)

        assert list(loaded) == ["billing:2024-02"]
        assert loaded["billing:2024-02"].updated_at == NOW
        assert loaded["billing:2024-02"].items == {"food": Decimal("10.00")}

    def test_put_keeps_only_newest_plans(self):
        plans = {}
        for offset in range(MAX_PLAN_COUNT):
            key = f"{2020 + offset // 12}-{offset % 12 + 1:02d}"
            plans = put_plan(plans, PeriodMode.CALENDAR, key, {}, NOW - timedelta(days=100 - offset))

        plans = put_plan(plans, PeriodMode.BILLING, "2024-03", {"food": Decimal("1")}, NOW)

        assert len(plans) == MAX_PLAN_COUNT
        assert "calendar:2020-01" not in plans
        assert next(iter(plans)) == "billing:2024-03"

    def test_put_replaces_existing_plan(self):
        plans = put_plan({}, PeriodMode.CALENDAR, "2024-03", {"food": Decimal("1")}, NOW)
        plans = put_plan(plans, PeriodMode.CALENDAR, "2024-03", {}, NOW + timedelta(hours=1))

        assert plans["calendar:2024-03"].items == {}
