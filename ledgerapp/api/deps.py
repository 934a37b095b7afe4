"""
API dependencies.
"""

from fastapi import Request

from ledgerapp.application.book import LedgerBook


def get_book(request: Request) -> LedgerBook:
    """Dependency - The ledger book held by the running app."""
    return request.app.state.book
