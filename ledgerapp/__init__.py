"""Double-entry ledger: accounts, posting, balances and reversals."""

__version__ = "0.1.0"
