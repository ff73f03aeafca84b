"""Error codes and user-friendly messages.

Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    "TXN_001": {
        "code": "TXN_001",
        "message": "Transaction not found",
        "user_message": "We couldn't find this transaction.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "TXN_002": {
        "code": "TXN_002",
        "message": "No transaction ids provided",
        "user_message": "No transactions were selected.",
        "suggestion": "Select at least one transaction and try again.",
        "retry_allowed": False,
    },
    "TXN_003": {
        "code": "TXN_003",
        "message": "Invalid month filter",
        "user_message": "The month filter isn't a valid month.",
        "suggestion": "Use the YYYY-MM format, for example 2024-03.",
        "retry_allowed": False,
    },
    "CAT_001": {
        "code": "CAT_001",
        "message": "Category not found",
        "user_message": "That category doesn't exist.",
        "suggestion": "Please choose a category from the list.",
        "retry_allowed": False,
    },
    "CAT_002": {
        "code": "CAT_002",
        "message": "Keyword learning requested without a category",
        "user_message": "A keyword can only be learned for a category.",
        "suggestion": "Choose a category, or turn off learning for this change.",
        "retry_allowed": False,
    },
    "IMP_001": {
        "code": "IMP_001",
        "message": "Import row could not be parsed",
        "user_message": "One of the statement rows could not be read.",
        "suggestion": "The row was skipped. Check its date and amount columns.",
        "retry_allowed": False,
    },
    "IMP_002": {
        "code": "IMP_002",
        "message": "Import batch contains no rows",
        "user_message": "The statement contains no transactions.",
        "suggestion": "Please upload a statement file with at least one transaction.",
        "retry_allowed": False,
    },
    "IMP_003": {
        "code": "IMP_003",
        "message": "Account not found",
        "user_message": "We couldn't find the account for this import.",
        "suggestion": "Please choose an existing account.",
        "retry_allowed": False,
    },
    "AI_001": {
        "code": "AI_001",
        "message": "External classifier unavailable",
        "user_message": "Automatic categorization is temporarily unavailable.",
        "suggestion": "Transactions were left uncategorized. Try again later.",
        "retry_allowed": True,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "message": "Resource already exists",
        "user_message": "This record already exists.",
        "suggestion": "Please check if the record was already created.",
        "retry_allowed": False,
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request data failed validation",
        "user_message": "Invalid input data.",
        "suggestion": "Please check your input and try again.",
        "retry_allowed": True,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred.",
        "suggestion": "Please try again later or contact support.",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details. Unknown codes map to a generic entry.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    return get_error(error_code)["user_message"]


def is_retryable(error_code: str) -> bool:
    return get_error(error_code)["retry_allowed"]
