"""
Pytest configuration and fixtures.
"""

from datetime import datetime, timezone

import pytest

from ledgerapp.application.book import LedgerBook
from ledgerapp.domain.entities import JournalEntry
from ledgerapp.domain.exceptions import SequenceConflict
from ledgerapp.domain.services import ILedgerStore
from ledgerapp.domain.value_objects import AccountType, Line


class MemoryStore(ILedgerStore):
    """Ledger store keeping appended entries in a list."""

    def __init__(self, on_append=None):
        self.entries: list[JournalEntry] = []
        self.on_append = on_append

    def append(self, entry: JournalEntry) -> None:
        if self.on_append is not None:
            self.on_append(entry)
        if any(stored.sequence == entry.sequence for stored in self.entries):
            raise SequenceConflict(entry.sequence)
        self.entries.append(entry)

    def load_entries(self, after_sequence: int = 0) -> list[JournalEntry]:
        return [entry for entry in self.entries if entry.sequence > after_sequence]


def sale(amount: int, timestamp: datetime | None = None, memo: str = "Cash sale") -> JournalEntry:
    """Debit Cash, credit Revenue."""
    values = {
        "lines": (Line.debit("Cash", amount), Line.credit("Revenue", amount)),
        "memo": memo,
    }
    if timestamp is not None:
        values["timestamp"] = timestamp
    return JournalEntry(**values)


@pytest.fixture
def book() -> LedgerBook:
    return LedgerBook()


@pytest.fixture
def cash_and_revenue(book: LedgerBook) -> LedgerBook:
    book.create_account("Cash", "Cash on hand", AccountType.ASSET)
    book.create_account("Revenue", "Sales revenue", AccountType.REVENUE)
    return book


@pytest.fixture
def full_chart(cash_and_revenue: LedgerBook) -> LedgerBook:
    book = cash_and_revenue
    book.create_account("Payable", "Accounts payable", AccountType.LIABILITY)
    book.create_account("Capital", "Owner's capital", AccountType.EQUITY)
    book.create_account("Rent", "Rent expense", AccountType.EXPENSE)
    return book


@pytest.fixture
def jan_1() -> datetime:
    return datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def feb_1() -> datetime:
    return datetime(2026, 2, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mar_1() -> datetime:
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
