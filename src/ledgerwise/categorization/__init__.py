"""Transaction categorization.

Deterministic, local building blocks: text normalization, merchant
signatures, fuzzy merchant matching, keyword-table categorization,
recurring-charge detection and cascade candidate selection. The only
network-bound piece is the optional AI classifier in ``ai``.
"""

from .keywords import (
    Categorization,
    ConfidenceScorer,
    KeywordCategorizer,
    KeywordEntry,
    KeywordTable,
    LengthRatioScorer,
)
from .recurring import RecurringKeywordSet
from .signature import GENERIC_TOKENS, extract_signature, merchant_tokens
from .similarity import STRATEGIES, is_same_merchant
from .text import compact, normalize, tokenize

__all__ = [
    "Categorization",
    "ConfidenceScorer",
    "GENERIC_TOKENS",
    "KeywordCategorizer",
    "KeywordEntry",
    "KeywordTable",
    "LengthRatioScorer",
    "RecurringKeywordSet",
    "STRATEGIES",
    "compact",
    "extract_signature",
    "is_same_merchant",
    "merchant_tokens",
    "normalize",
    "tokenize",
]
