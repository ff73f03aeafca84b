"""Exception hierarchy for the ledger service layer.

Each exception carries an error_code that maps to the catalog in errors.py.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "TXN_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class NotFoundError(LedgerError):
    """Raised when a transaction, category or account does not exist."""

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=404)


class InvalidInputError(LedgerError):
    """Raised when a request is well-formed but semantically invalid."""

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=400)


class ImportRowError(LedgerError):
    """A single statement row that could not be parsed.

    Never raised out of an import batch; collected into the batch result so
    the remaining rows are still imported.
    """

    def __init__(self, row_index: int, field: str, value: Any = None):
        self.row_index = row_index
        self.field = field
        super().__init__(
            "IMP_001",
            {"row": row_index, "field": field, "value": None if value is None else str(value)},
            http_status=400,
        )


class ClassifierUnavailableError(LedgerError):
    """Raised by the AI client when the external classifier cannot answer."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("AI_001", details, http_status=503)
