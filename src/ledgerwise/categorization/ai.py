"""External AI classifier client.

The classifier is an opaque collaborator: given descriptions and the list of
category names it returns ``{description: category_name}`` for whatever it
could classify. Calls are bounded by a timeout and every failure degrades to
an empty mapping, so categorization never blocks on it.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Iterable, Sequence, TypeVar

import anthropic

from ledgerwise.config import settings
from ledgerwise.core.exceptions import ClassifierUnavailableError

from .text import normalize

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
_SMART_QUOTES = str.maketrans({"“": '"', "”": '"', "‘": "'", "’": "'"})

PROMPT_TEMPLATE = """אתה מסווג עסקאות מדפי חשבון בנק וכרטיסי אשראי בישראל.

הקטגוריות הזמינות: {categories}

עבור כל תיאור עסקה, זהה את בית העסק ובחר את הקטגוריה המתאימה ביותר מהרשימה.
החזר אובייקט JSON בלבד, ללא הסברים, שבו המפתח הוא תיאור העסקה המדויק כפי שמופיע
למטה והערך הוא שם הקטגוריה מהרשימה. השמט תיאורים שאינך מצליח לסווג.

תיאורי העסקאות:
{descriptions}"""


def _try_parse_object(candidate: str) -> dict[str, str] | None:
    try:
        parsed = json.loads(candidate)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    return {
        key.strip(): value.strip()
        for key, value in parsed.items()
        if isinstance(key, str) and isinstance(value, str) and key.strip() and value.strip()
    }


def parse_reply(content: str) -> dict[str, str]:
    """Extract the description -> category mapping from a model reply.

    Accepts bare JSON, JSON wrapped in code fences, a JSON object embedded in
    prose, and objects written with typographic quotes. Anything else yields
    an empty mapping.
    """
    cleaned = _CODE_FENCE.sub("", content or "").strip()
    direct = _try_parse_object(cleaned)
    if direct is not None:
        return direct

    match = _JSON_OBJECT.search(cleaned)
    if not match:
        return {}
    embedded = _try_parse_object(match.group(0))
    if embedded is not None:
        return embedded
    return _try_parse_object(match.group(0).translate(_SMART_QUOTES)) or {}


def resolve_description(mapping: dict[str, str], description: str) -> str | None:
    """Look up a description in a classifier reply.

    Models sometimes echo keys with different whitespace or punctuation, so
    fall back from the exact key to the trimmed key to the normalized key.
    """
    for key in (description, description.strip()):
        value = mapping.get(key)
        if value and value.strip():
            return value.strip()

    target = normalize(description)
    if not target:
        return None
    for key, value in mapping.items():
        if normalize(key) == target and value and value.strip():
            return value.strip()
    return None


def resolve_category(name: str | None, categories: Iterable[T], attr: str = "name") -> T | None:
    """Find the category whose name equals ``name`` exactly (case-sensitive)."""
    if not name:
        return None
    for category in categories:
        if getattr(category, attr) == name:
            return category
    return None


class AIClassifier:
    """LLM fallback classifier backed by the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout_seconds: float | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ai_api_key
        self.model = model or settings.ai_model
        self.timeout_seconds = timeout_seconds or settings.ai_timeout_seconds
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                base_url=settings.ai_base_url,
                timeout=self.timeout_seconds,
                max_retries=settings.ai_max_retries,
            )
        return self._client

    def build_prompt(self, descriptions: Sequence[str], category_names: Sequence[str]) -> str:
        numbered = "\n".join(f"{i}. {d}" for i, d in enumerate(descriptions, start=1))
        return PROMPT_TEMPLATE.format(categories=", ".join(category_names), descriptions=numbered)

    async def classify(
        self, descriptions: Sequence[str], category_names: Sequence[str]
    ) -> dict[str, str]:
        """Classify descriptions; returns {} when disabled, slow or failing."""
        if not descriptions or not self.enabled:
            return {}
        try:
            content = await self._request(self.build_prompt(descriptions, category_names))
        except ClassifierUnavailableError as exc:
            logger.warning(
                "AI classifier unavailable, leaving transactions uncategorized",
                extra={"error_code": exc.error_code, "count": len(descriptions)},
            )
            return {}

        result = parse_reply(content)
        logger.info(
            "AI classifier answered",
            extra={"count": len(result)},
        )
        return result

    async def _request(self, prompt: str) -> str:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=2000,
                temperature=0.0,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APITimeoutError as exc:
            raise ClassifierUnavailableError({"error_type": "timeout"}) from exc
        except anthropic.APIError as exc:
            raise ClassifierUnavailableError({"error_type": type(exc).__name__}) from exc

        if not response.content:
            raise ClassifierUnavailableError({"reason": "empty_content"})
        return getattr(response.content[0], "text", "") or ""
