"""Keyword-table categorization.

The keyword table is an explicit, caller-owned state object. Nothing here
reads the database: whoever writes to the backing keyword store is
responsible for calling ``KeywordTable.reload`` with the fresh rows.

Matching runs in two passes:
1. Exact rules, highest priority first. A rule whose normalized keyword equals
   the normalized description wins with confidence 1.0.
2. Substring rules. Every non-exact keyword contained in the description is a
   candidate; the longest keyword wins (first seen on ties) and the confidence
   comes from a pluggable scorer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterable, Protocol

from .text import normalize

MAX_SUBSTRING_CONFIDENCE = 0.95


@dataclass(frozen=True)
class KeywordEntry:
    """One categorization rule."""

    keyword: str
    category_id: Hashable
    is_exact: bool = False
    priority: int = 0


@dataclass(frozen=True)
class Categorization:
    """Result of categorizing one description."""

    category_id: Hashable
    confidence: float
    matched_keyword: str


class ConfidenceScorer(Protocol):
    def score(self, keyword: str, description: str) -> float:
        """Confidence for a substring match of normalized ``keyword`` in ``description``."""
        ...


class LengthRatioScorer:
    """How much of the description the keyword covers, boosted and capped.

    ``min(cap, len(keyword) / len(description) * boost)``
    """

    def __init__(self, boost: float = 1.5, cap: float = MAX_SUBSTRING_CONFIDENCE):
        self.boost = boost
        self.cap = cap

    def score(self, keyword: str, description: str) -> float:
        if not description:
            return 0.0
        return min(self.cap, len(keyword) / len(description) * self.boost)


class KeywordTable:
    """In-memory keyword rules, normalized and ordered once per reload."""

    def __init__(self, entries: Iterable[KeywordEntry] | None = None):
        self._exact: list[tuple[str, KeywordEntry]] = []
        self._substring: list[tuple[str, KeywordEntry]] = []
        self._loaded = False
        if entries is not None:
            self.reload(entries)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._exact) + len(self._substring)

    def reload(self, entries: Iterable[KeywordEntry]) -> None:
        """Replace the table contents.

        Entries are ordered by descending priority; entries with equal
        priority keep their input order. Keywords that normalize to an empty
        string are dropped since they would match every description.
        """
        ordered = sorted(entries, key=lambda entry: -entry.priority)
        exact: list[tuple[str, KeywordEntry]] = []
        substring: list[tuple[str, KeywordEntry]] = []
        for entry in ordered:
            normalized = normalize(entry.keyword)
            if not normalized:
                continue
            (exact if entry.is_exact else substring).append((normalized, entry))
        self._exact = exact
        self._substring = substring
        self._loaded = True

    def invalidate(self) -> None:
        """Mark the table stale; callers check ``is_loaded`` before use."""
        self._loaded = False

    @property
    def exact_rules(self) -> list[tuple[str, KeywordEntry]]:
        return self._exact

    @property
    def substring_rules(self) -> list[tuple[str, KeywordEntry]]:
        return self._substring


class KeywordCategorizer:
    """Stateless matcher over a caller-owned ``KeywordTable``."""

    def __init__(self, table: KeywordTable, scorer: ConfidenceScorer | None = None):
        self.table = table
        self.scorer = scorer or LengthRatioScorer()

    def categorize(self, description: str | None) -> Categorization | None:
        """Map a description to a category, or None when no rule matches."""
        text = normalize(description)
        if not text:
            return None

        for keyword, entry in self.table.exact_rules:
            if keyword == text:
                return Categorization(entry.category_id, 1.0, entry.keyword)

        best: tuple[str, KeywordEntry] | None = None
        for keyword, entry in self.table.substring_rules:
            if keyword in text and (best is None or len(keyword) > len(best[0])):
                best = (keyword, entry)

        if best is None:
            return None

        keyword, entry = best
        return Categorization(entry.category_id, self.scorer.score(keyword, text), entry.keyword)

    def categorize_many(self, descriptions: Iterable[str]) -> dict[str, Categorization | None]:
        return {description: self.categorize(description) for description in descriptions}
