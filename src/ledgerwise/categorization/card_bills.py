"""Consolidated credit-card bill detection.

A bank account pays each credit card once a month with a single charge. The
card's own statement already lists every purchase behind that charge, so
keeping both double-counts card spending in period totals. These helpers
find the bank-side charges; the caller decides what to do with them.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Any, Hashable, Iterable, Protocol

from ledgerwise.core.institutions import is_bank_institution

CARD_BILL_KEYWORDS: tuple[str, ...] = (
    "מסטרקרד",
    "מסטרקארד",
    "מאסטרקארד",
    "mastercard",
    "ישראכרט",
    "isracard",
    "לאומיקארד",
    "leumicard",
    "מקס",
    "max",
    "ויזהכאל",
    "visa",
    "amex",
    "כרטיסאשראי",
    "חיובכרטיס",
)

_NON_LETTERS = re.compile(r"[^\u0590-\u05ffa-z]")
_MONTH = re.compile(r"^(\d{4})-(\d{2})$")


class CardChargeCandidate(Protocol):
    id: Hashable
    description: str
    amount: Decimal
    is_excluded: bool
    account: Any


def letters_only(text: str | None) -> str:
    """Lowercase and keep only Hebrew and Latin letters."""
    return _NON_LETTERS.sub("", (text or "").lower())


def is_consolidated_card_charge(description: str | None) -> bool:
    text = letters_only(description)
    return any(keyword in text for keyword in CARD_BILL_KEYWORDS)


def month_bounds(month: str) -> tuple[date, date] | None:
    """Half-open ``[first day, first day of next month)`` for ``YYYY-MM``, else None."""
    match = _MONTH.match(month.strip())
    if not match:
        return None
    year, month_number = int(match.group(1)), int(match.group(2))
    if not 1 <= month_number <= 12:
        return None
    start = date(year, month_number, 1)
    end = date(year + 1, 1, 1) if month_number == 12 else date(year, month_number + 1, 1)
    return start, end


def select_consolidated_card_charges(candidates: Iterable[CardChargeCandidate]) -> list[Hashable]:
    """Ids of non-excluded bank-account expenses that look like a card bill."""
    return [
        tx.id
        for tx in candidates
        if not tx.is_excluded
        and tx.amount < 0
        and tx.account is not None
        and is_bank_institution(tx.account.institution)
        and is_consolidated_card_charge(tx.description)
    ]
