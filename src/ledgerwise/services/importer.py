"""Statement import: dedup, parse, categorize and persist.

``plan_import`` is pure: given parsed rows, the dedup rows already stored for
the account and the loaded keyword state, it decides per row whether to
import it (and with which category/recurring flag), skip it as a duplicate or
report it as unparseable. ``ImportService`` wraps it with persistence.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.categorization.keywords import KeywordCategorizer
from ledgerwise.categorization.recurring import RecurringKeywordSet
from ledgerwise.core.exceptions import ImportRowError, InvalidInputError, NotFoundError
from ledgerwise.models.transaction import Transaction
from ledgerwise.repositories.account import AccountRepository
from ledgerwise.repositories.transaction import TransactionRepository
from ledgerwise.schemas.importing import ImportResult, ImportRow, ImportRowResult
from ledgerwise.services.keyword_state import KeywordState

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# Transaction.amount is Numeric(12, 2)
MAX_ABS_AMOUNT = Decimal("1e10")


@dataclass(frozen=True)
class ParsedRow:
    index: int
    date: date
    amount: Decimal
    description: str
    reference: str | None = None
    value_date: date | None = None


@dataclass
class ImportPlan:
    accepted: list[tuple[ParsedRow, ImportRowResult]] = field(default_factory=list)
    outcomes: list[ImportRowResult] = field(default_factory=list)
    duplicates: int = 0
    errors: list[ImportRowError] = field(default_factory=list)


def parse_amount(value: Any) -> Decimal:
    """Exact decimal amount, rounded to cents.

    Raises ValueError when unparseable or too large to store.
    """
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).replace(",", "").strip())
        if amount.is_finite() and abs(amount) < MAX_ABS_AMOUNT:
            amount = amount.quantize(CENT)
            if abs(amount) < MAX_ABS_AMOUNT:
                return amount
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {value!r}") from exc
    raise ValueError(f"invalid amount: {value!r}")


def parse_row(index: int, row: ImportRow) -> ParsedRow:
    """Validate one row. Raises ImportRowError naming the offending field."""
    description = (row.description or "").strip()
    if not description:
        raise ImportRowError(index, "description")

    try:
        amount = parse_amount(row.amount)
    except ValueError as exc:
        raise ImportRowError(index, "amount", row.amount) from exc

    if isinstance(row.date, date):
        day = row.date
    else:
        try:
            day = date.fromisoformat(str(row.date).strip()[:10])
        except ValueError as exc:
            raise ImportRowError(index, "date", row.date) from exc

    reference = (row.reference or "").strip() or None
    return ParsedRow(index, day, amount, description, reference, row.value_date)


def content_key(day: date, amount: Decimal, description: str) -> str:
    return f"{day.isoformat()}_{Decimal(amount).quantize(CENT)}_{description}"


def dedup_key(row: ParsedRow) -> str:
    """Reference when present, else the (date, amount, description) content key."""
    return row.reference or content_key(row.date, row.amount, row.description)


def plan_import(
    rows: Sequence[ImportRow],
    existing: Iterable[tuple[date, Decimal, str, str | None]],
    categorizer: KeywordCategorizer,
    recurring: RecurringKeywordSet,
) -> ImportPlan:
    """Decide the outcome of every row in an import batch.

    A row is a duplicate when its reference matches a stored or earlier
    reference, or when its content key matches a stored or earlier row.
    """
    seen_content: set[str] = set()
    seen_references: set[str] = set()
    for day, amount, description, reference in existing:
        seen_content.add(content_key(day, amount, description))
        if reference:
            seen_references.add(reference)

    plan = ImportPlan()
    for index, row in enumerate(rows):
        try:
            parsed = parse_row(index, row)
        except ImportRowError as exc:
            plan.errors.append(exc)
            plan.outcomes.append(
                ImportRowResult(index=index, status="error", error_code=exc.error_code, error_field=exc.field)
            )
            continue

        key = content_key(parsed.date, parsed.amount, parsed.description)
        if (parsed.reference and parsed.reference in seen_references) or key in seen_content:
            plan.duplicates += 1
            plan.outcomes.append(ImportRowResult(index=index, status="duplicate", dedup_key=dedup_key(parsed)))
            continue

        seen_content.add(key)
        if parsed.reference:
            seen_references.add(parsed.reference)

        categorization = categorizer.categorize(parsed.description)
        outcome = ImportRowResult(
            index=index,
            status="imported",
            dedup_key=dedup_key(parsed),
            category_id=categorization.category_id if categorization else None,
            confidence=categorization.confidence if categorization else 0.0,
            is_recurring=recurring.is_recurring(parsed.description),
        )
        plan.accepted.append((parsed, outcome))
        plan.outcomes.append(outcome)

    return plan


class ImportService:
    """Persist a parsed statement into one account."""

    def __init__(self, db: AsyncSession, state: KeywordState):
        self.db = db
        self.state = state
        self.account_repo = AccountRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def import_rows(self, account_id: UUID, rows: Sequence[ImportRow]) -> ImportResult:
        if not rows:
            raise InvalidInputError("IMP_002")

        account = await self.account_repo.get_by_id(account_id)
        if account is None:
            raise NotFoundError("IMP_003", {"account_id": str(account_id)})

        await self.state.ensure_loaded(self.db)
        existing = await self.transaction_repo.get_dedup_rows(account_id)
        plan = plan_import(rows, existing, self.state.categorizer, self.state.recurring)

        for parsed, outcome in plan.accepted:
            self.db.add(
                Transaction(
                    account_id=account_id,
                    date=parsed.date,
                    value_date=parsed.value_date,
                    amount=parsed.amount,
                    description=parsed.description,
                    reference=parsed.reference,
                    category_id=outcome.category_id,
                    is_auto_categorized=outcome.category_id is not None,
                    is_recurring=outcome.is_recurring,
                )
            )

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        for error in plan.errors:
            logger.warning(
                "Skipped unparseable import row",
                extra={"account_id": str(account_id), "error_code": error.error_code, "row": error.row_index},
            )
        logger.info(
            "Import finished",
            extra={"account_id": str(account_id), "count": len(plan.accepted)},
        )

        return ImportResult(
            account_id=account_id,
            total=len(rows),
            imported=len(plan.accepted),
            duplicates=plan.duplicates,
            errors=len(plan.errors),
            rows=plan.outcomes,
        )
