"""Fuzzy "same merchant" matching.

Matching is an ordered chain of independent strategies; the first strategy
that accepts a pair wins. Every strategy demands some distinctiveness
(length >= 3, whole-word boundaries, a majority token overlap) because a match
triggers bulk category rewrites.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Callable

from .signature import extract_signature, merchant_tokens
from .text import compact, normalize

MIN_SIGNATURE_LENGTH = 3
MIN_TOKEN_OVERLAP = 0.6


@dataclass(frozen=True)
class MerchantText:
    """A description with its derived forms computed once."""

    raw: str

    @cached_property
    def normalized(self) -> str:
        return normalize(self.raw)

    @cached_property
    def signature(self) -> str | None:
        return extract_signature(self.raw)

    @cached_property
    def tokens(self) -> list[str]:
        return merchant_tokens(self.raw)


Strategy = Callable[[MerchantText, MerchantText], bool]


def _contains_word(haystack: str, phrase: str) -> bool:
    return haystack.startswith(f"{phrase} ") or f" {phrase} " in haystack


def exact_text(a: MerchantText, b: MerchantText) -> bool:
    return a.normalized == b.normalized


def equal_signature(a: MerchantText, b: MerchantText) -> bool:
    return a.signature is not None and a.signature == b.signature


def equal_compact_signature(a: MerchantText, b: MerchantText) -> bool:
    """Spacing variants of one brand, e.g. "ag bar" vs "agbar"."""
    if a.signature is None or b.signature is None:
        return False
    return compact(a.signature) == compact(b.signature)


def source_signature_in_candidate(a: MerchantText, b: MerchantText) -> bool:
    if a.signature is None or len(a.signature) < MIN_SIGNATURE_LENGTH:
        return False
    return _contains_word(b.normalized, a.signature)


def candidate_signature_in_source(a: MerchantText, b: MerchantText) -> bool:
    return source_signature_in_candidate(b, a)


def same_first_token(a: MerchantText, b: MerchantText) -> bool:
    if not a.tokens or not b.tokens:
        return False
    return a.tokens[0] == b.tokens[0] and len(a.tokens[0]) >= MIN_SIGNATURE_LENGTH


def token_overlap(a: MerchantText, b: MerchantText) -> bool:
    if not a.tokens or not b.tokens:
        return False
    source = set(a.tokens)
    shared = sum(1 for token in b.tokens if token in source)
    return shared / max(len(a.tokens), len(b.tokens)) >= MIN_TOKEN_OVERLAP


# Ordering matters: cheap, precise strategies first.
STRATEGIES: list[Strategy] = [
    exact_text,
    equal_signature,
    equal_compact_signature,
    source_signature_in_candidate,
    candidate_signature_in_source,
    same_first_token,
    token_overlap,
]


def is_same_merchant(
    source_description: str | None,
    candidate_description: str | None,
    strategies: list[Strategy] | None = None,
) -> bool:
    """Decide whether two descriptions refer to the same merchant.

    Args:
        source_description: Description of the transaction the user edited.
        candidate_description: Description of another transaction.
        strategies: Override the default strategy chain.

    Returns:
        True if any strategy accepts the pair. False when either side
        normalizes to an empty string.
    """
    source = MerchantText(source_description or "")
    candidate = MerchantText(candidate_description or "")
    if not source.normalized or not candidate.normalized:
        return False

    return any(strategy(source, candidate) for strategy in (strategies or STRATEGIES))
