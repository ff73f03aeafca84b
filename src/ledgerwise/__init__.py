"""Ledgerwise: merchant categorization and period analytics for bank statements."""

__version__ = "0.1.0"
