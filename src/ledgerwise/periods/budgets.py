"""Per-period variable budget plans.

A plan maps expense category ids to a planned amount for one period. Plans
are stored together as one JSON document, keyed by ``"{mode}:{period_key}"``
so calendar and billing plans for the same month never collide. Only the
most recently updated plans are kept.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from .definitions import PeriodMode

logger = logging.getLogger(__name__)

MAX_PLAN_COUNT = 36
MAX_PLAN_ITEM_COUNT = 200
MAX_CATEGORY_ID_LENGTH = 100
MAX_AMOUNT = Decimal("1000000")
CENT = Decimal("0.01")

_PERIOD_KEY = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


@dataclass(frozen=True)
class BudgetPlanRecord:
    updated_at: datetime
    items: dict[str, Decimal] = field(default_factory=dict)


def normalize_category_id(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed or len(trimmed) > MAX_CATEGORY_ID_LENGTH:
        return None
    return trimmed


def normalize_amount(value: Any) -> Decimal | None:
    """Positive amount rounded to cents and capped at ``MAX_AMOUNT``; None otherwise."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    if amount > MAX_AMOUNT:
        return MAX_AMOUNT
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_items(items: Mapping[Any, Any] | Iterable[tuple[Any, Any]]) -> dict[str, Decimal]:
    """Keep valid ``category_id -> amount`` pairs, at most ``MAX_PLAN_ITEM_COUNT``."""
    pairs = items.items() if isinstance(items, Mapping) else items
    normalized: dict[str, Decimal] = {}
    for raw_id, raw_amount in pairs:
        category_id = normalize_category_id(raw_id)
        amount = normalize_amount(raw_amount)
        if category_id is None or amount is None:
            continue
        normalized[category_id] = amount
        if len(normalized) >= MAX_PLAN_ITEM_COUNT:
            break
    return normalized


def parse_budget_period_key(value: Any) -> str | None:
    """``YYYY-MM`` with a valid month, else None."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed if _PERIOD_KEY.match(trimmed) else None


def plan_storage_key(mode: PeriodMode, period_key: str) -> str:
    return f"{mode.value}:{period_key}"


def _is_valid_storage_key(key: Any) -> bool:
    if not isinstance(key, str) or key.count(":") != 1:
        return False
    mode, period_key = key.split(":")
    return mode in {m.value for m in PeriodMode} and parse_budget_period_key(period_key) is not None


def _parse_updated_at(value: Any, now: datetime) -> datetime:
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return now
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return now


def _trim(plans: Mapping[str, BudgetPlanRecord]) -> dict[str, BudgetPlanRecord]:
    newest_first = sorted(plans.items(), key=lambda entry: entry[1].updated_at, reverse=True)
    return dict(newest_first[:MAX_PLAN_COUNT])


def load_plans(raw: str | None, now: datetime | None = None) -> dict[str, BudgetPlanRecord]:
    """Parse the stored document. Malformed documents or entries are dropped, never raised."""
    if not raw:
        return {}
    now = now or datetime.now(timezone.utc)
    try:
        document = json.loads(raw)
    except ValueError:
        logger.warning("Discarding unreadable budget plan store")
        return {}
    raw_plans = document.get("plans") if isinstance(document, dict) else None
    if not isinstance(raw_plans, dict):
        return {}

    plans: dict[str, BudgetPlanRecord] = {}
    for key, record in raw_plans.items():
        if not _is_valid_storage_key(key) or not isinstance(record, dict):
            continue
        items = record.get("items")
        if not isinstance(items, dict):
            continue
        plans[key] = BudgetPlanRecord(
            updated_at=_parse_updated_at(record.get("updated_at"), now),
            items=normalize_items(items),
        )
    return _trim(plans)


def dump_plans(plans: Mapping[str, BudgetPlanRecord]) -> str:
    return json.dumps(
        {
            "plans": {
                key: {
                    "updated_at": record.updated_at.isoformat(),
                    "items": {category_id: str(amount) for category_id, amount in record.items.items()},
                }
                for key, record in plans.items()
            }
        },
        ensure_ascii=False,
    )


def put_plan(
    plans: Mapping[str, BudgetPlanRecord],
    mode: PeriodMode,
    period_key: str,
    items: Mapping[str, Decimal],
    now: datetime,
) -> dict[str, BudgetPlanRecord]:
    """New plan collection with ``items`` stored for the period, trimmed to the newest plans."""
    updated = dict(plans)
    updated[plan_storage_key(mode, period_key)] = BudgetPlanRecord(updated_at=now, items=dict(items))
    return _trim(updated)
