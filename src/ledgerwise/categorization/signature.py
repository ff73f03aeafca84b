"""Merchant signature extraction.

A signature is the first substantive word of a description once bank
boilerplate has been stripped, e.g. ``"העברה ב-ביט שופרסל דיל 123"`` yields
``"שופרסל"``. It is the identity used for fuzzy merchant matching and the
keyword harvested by the learning loop.
"""

from __future__ import annotations

from .text import normalize

# Banking boilerplate: transfer/charge verbs, issuer brands, payment apps and
# bank names in Hebrew and Latin script.
GENERIC_TOKENS: frozenset[str] = frozenset(
    {
        "העברה",
        "העברות",
        "העב",
        "העברת",
        "חיוב",
        "חיובים",
        "זיכוי",
        "תשלום",
        "תשלומים",
        "עסקה",
        "עסקאות",
        "עמלה",
        "עמלות",
        "משיכה",
        "הפקדה",
        "אשראי",
        "כרטיס",
        "ויזה",
        "מאסטרקארד",
        "מסטרקארד",
        "ישראכרט",
        "ביט",
        "פייבוקס",
        "פפר",
        "בנק",
        "בנקאי",
        "בנקאית",
        "הפועלים",
        "לאומי",
        "הוראת",
        "קבע",
        "mastercard",
        "visa",
        "direct",
        "debit",
        "credit",
        "bit",
        "paybox",
        "pepper",
        "bank",
        "cal",
        "max",
    }
)


def merchant_tokens(description: str | None) -> list[str]:
    """Significant tokens of a description, in order.

    Drops single-character tokens, purely numeric tokens and generic banking
    tokens.
    """
    return [
        token
        for token in normalize(description).split(" ")
        if len(token) > 1 and not token.isdigit() and token not in GENERIC_TOKENS
    ]


def extract_signature(description: str | None) -> str | None:
    """Derive a short canonical merchant token from a description.

    Returns None when nothing but boilerplate remains. When the first token is
    two characters or shorter and a second token exists, the two-word phrase is
    returned so short brands like ``"רי בר"`` stay distinctive.
    """
    tokens = merchant_tokens(description)
    if not tokens:
        return None

    first = tokens[0]
    if len(first) <= 2 and len(tokens) > 1:
        return f"{first} {tokens[1]}"
    return first
