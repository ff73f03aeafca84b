"""Financial institution metadata."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Institution(str, Enum):
    BANK_HAPOALIM = "BANK_HAPOALIM"
    BANK_LEUMI = "BANK_LEUMI"
    ISRACARD = "ISRACARD"
    LEUMI_CARD = "LEUMI_CARD"
    OTHER = "OTHER"


BANK_INSTITUTIONS: Final[frozenset[Institution]] = frozenset(
    {Institution.BANK_HAPOALIM, Institution.BANK_LEUMI, Institution.OTHER}
)
CREDIT_INSTITUTIONS: Final[frozenset[Institution]] = frozenset(
    {Institution.ISRACARD, Institution.LEUMI_CARD}
)


def _coerce(value: str | Institution | None) -> Institution | None:
    if value is None:
        return None
    if isinstance(value, Institution):
        return value
    try:
        return Institution(value.strip().upper())
    except ValueError:
        return None


def is_bank_institution(value: str | Institution | None) -> bool:
    return _coerce(value) in BANK_INSTITUTIONS


def is_credit_institution(value: str | Institution | None) -> bool:
    return _coerce(value) in CREDIT_INSTITUTIONS
