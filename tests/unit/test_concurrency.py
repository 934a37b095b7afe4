"""
Unit tests - Concurrent writers and readers.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from ledgerapp.domain.exceptions import AlreadyReversed
from tests.conftest import MemoryStore, sale

WRITERS = 16
ENTRIES = 200


class TestConcurrentPosting:
    """Test serialized posting under many threads."""

    def test_disjoint_posts_all_visible_once(self, cash_and_revenue):
        book = cash_and_revenue
        store = MemoryStore()
        book.engine.store = store
        drafts = [sale(amount) for amount in range(1, ENTRIES + 1)]

        with ThreadPoolExecutor(max_workers=WRITERS) as pool:
            posted = list(pool.map(book.post, drafts))

        sequences = sorted(entry.sequence for entry in posted)
        assert sequences == list(range(1, ENTRIES + 1))
        assert len(book.ledger) == ENTRIES
        assert {entry.id for entry in book.ledger.entries()} == {draft.id for draft in drafts}
        assert [entry.sequence for entry in store.entries] == list(range(1, ENTRIES + 1))
        assert book.balance_as_of("Cash") == ENTRIES * (ENTRIES + 1) // 2
        assert book.trial_balance().is_balanced()

    def test_readers_never_see_partial_entries(self, cash_and_revenue):
        """Every trial balance taken while writers run is balanced."""
        book = cash_and_revenue
        done = threading.Event()
        snapshots = []

        def read():
            while not done.is_set():
                snapshots.append(book.trial_balance())

        reader = threading.Thread(target=read)
        reader.start()
        try:
            with ThreadPoolExecutor(max_workers=WRITERS) as pool:
                list(pool.map(book.post, [sale(10) for _ in range(ENTRIES)]))
        finally:
            done.set()
            reader.join()

        assert snapshots
        for snapshot in snapshots:
            assert snapshot.is_balanced()
            cash = next(row for row in snapshot.rows if row.account_id == "Cash")
            assert cash.balance == 10 * snapshot.sequence

    def test_concurrent_reversal_of_same_entry(self, cash_and_revenue):
        book = cash_and_revenue
        original = book.post(sale(100))
        outcomes = []
        lock = threading.Lock()

        def attempt():
            try:
                book.reverse(original.id)
            except AlreadyReversed:
                result = "rejected"
            else:
                result = "reversed"
            with lock:
                outcomes.append(result)

        with ThreadPoolExecutor(max_workers=8) as pool:
            for _ in range(8):
                pool.submit(attempt)

        assert outcomes.count("reversed") == 1
        assert outcomes.count("rejected") == 7
        assert len(book.ledger) == 2
        assert book.balance_as_of("Cash") == 0


@pytest.mark.parametrize("workers", [1, 4])
def test_interleaved_creates_and_posts(book, workers):
    book.create_account("Cash", "Cash", "ASSET")
    book.create_account("Revenue", "Revenue", "REVENUE")

    def work(index):
        book.create_account(f"Extra-{index}", "Extra", "EXPENSE")
        return book.post(sale(index + 1))

    with ThreadPoolExecutor(max_workers=workers) as pool:
        list(pool.map(work, range(50)))

    assert len(book.registry) == 52
    assert book.ledger.last_sequence == 50
    assert book.trial_balance().is_balanced()
