"""Keyword-driven recurring-charge detection."""

from __future__ import annotations

from typing import Iterable

from .text import normalize


class RecurringKeywordSet:
    """Caller-owned set of recurring keywords.

    A description is recurring when its normalized text contains any stored
    keyword. Reload after every write to the backing keyword store.
    """

    def __init__(self, keywords: Iterable[str] | None = None):
        self._keywords: list[str] = []
        self._loaded = False
        if keywords is not None:
            self.reload(keywords)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def keywords(self) -> list[str]:
        return list(self._keywords)

    def __contains__(self, keyword: str) -> bool:
        return normalize(keyword) in self._keywords

    def __len__(self) -> int:
        return len(self._keywords)

    def reload(self, keywords: Iterable[str]) -> None:
        seen: dict[str, None] = {}
        for keyword in keywords:
            normalized = normalize(keyword)
            if normalized:
                seen.setdefault(normalized, None)
        self._keywords = list(seen)
        self._loaded = True

    def invalidate(self) -> None:
        self._loaded = False

    def match(self, description: str | None) -> str | None:
        """First keyword contained in the description, if any."""
        text = normalize(description)
        if not text:
            return None
        for keyword in self._keywords:
            if keyword in text:
                return keyword
        return None

    def is_recurring(self, description: str | None) -> bool:
        return self.match(description) is not None
