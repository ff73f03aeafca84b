"""Database models."""
from ledgerwise.models.account import Account
from ledgerwise.models.category import Category, CategoryKeyword, CategoryType
from ledgerwise.models.recurring_keyword import RecurringKeyword
from ledgerwise.models.setting import Setting
from ledgerwise.models.transaction import Transaction

__all__ = [
    "Account",
    "Category",
    "CategoryKeyword",
    "CategoryType",
    "RecurringKeyword",
    "Setting",
    "Transaction",
]
