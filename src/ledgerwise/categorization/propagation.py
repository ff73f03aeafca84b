"""Candidate selection for cascading updates.

Each selector is a pure function from a source transaction and a pool of
other transactions to the ids that should change. Applying the change is the
service layer's job. Selectors never return the source itself and skip rows
that already hold the target value, so re-running a cascade selects nothing.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Hashable, Iterable, Protocol

from .signature import extract_signature
from .similarity import is_same_merchant
from .text import normalize

Matcher = Callable[[str, str], bool]


class TransactionLike(Protocol):
    id: Hashable
    description: str
    amount: Decimal
    category_id: Hashable | None
    is_recurring: bool
    is_excluded: bool


def _same_sign(source_amount: Decimal, candidate_amount: Decimal) -> bool:
    if source_amount < 0:
        return candidate_amount < 0
    return candidate_amount > 0


def learnable_keyword(description: str | None) -> str | None:
    """Keyword the learning loop stores for a description (its signature)."""
    return extract_signature(description)


def select_similar_for_category(
    source: TransactionLike,
    pool: Iterable[TransactionLike],
    category_id: Hashable | None,
    matcher: Matcher = is_same_merchant,
) -> list[Hashable]:
    """Transactions that should receive the category just set on ``source``.

    Candidates must be other, non-excluded transactions with the same sign of
    amount, a different current category, and a merchant match.
    """
    return [
        candidate.id
        for candidate in pool
        if candidate.id != source.id
        and not candidate.is_excluded
        and candidate.category_id != category_id
        and _same_sign(source.amount, candidate.amount)
        and matcher(source.description, candidate.description)
    ]


def select_recurring_cascade(
    source: TransactionLike,
    pool: Iterable[TransactionLike],
    keyword: str,
) -> list[Hashable]:
    """Other, not-yet-recurring transactions whose description contains ``keyword``."""
    needle = normalize(keyword)
    if not needle:
        return []
    return [
        candidate.id
        for candidate in pool
        if candidate.id != source.id
        and not candidate.is_recurring
        and needle in normalize(candidate.description)
    ]


def select_identical(
    source: TransactionLike,
    pool: Iterable[TransactionLike],
    is_recurring: bool,
) -> list[Hashable]:
    """Exact duplicates of ``source``: same category, description (case-insensitive) and amount."""
    description = (source.description or "").casefold()
    return [
        candidate.id
        for candidate in pool
        if candidate.id != source.id
        and candidate.is_recurring != is_recurring
        and candidate.category_id == source.category_id
        and candidate.amount == source.amount
        and (candidate.description or "").casefold() == description
    ]


def select_merchant_family(
    source: TransactionLike,
    pool: Iterable[TransactionLike],
    is_recurring: bool,
    matcher: Matcher = is_same_merchant,
) -> list[Hashable]:
    """Same-category, same-sign transactions from the same merchant."""
    return [
        candidate.id
        for candidate in pool
        if candidate.id != source.id
        and not candidate.is_excluded
        and candidate.is_recurring != is_recurring
        and candidate.category_id == source.category_id
        and _same_sign(source.amount, candidate.amount)
        and matcher(source.description, candidate.description)
    ]
