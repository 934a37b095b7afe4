"""
Unit tests - Posting engine: atomic commit, sequencing, lifecycle errors.
"""

import uuid
from dataclasses import replace

import pytest

from ledgerapp.application.book import LedgerBook
from ledgerapp.domain.entities import JournalEntry
from ledgerapp.domain.exceptions import (
    AccountInUse,
    AlreadyPosted,
    CommitFailed,
    EmptyEntry,
    SequenceConflict,
    UnbalancedEntry,
    UnknownAccount,
    UnknownEntry,
    ValidationFailed,
)
from ledgerapp.domain.value_objects import AccountType, EntryStatus, Line
from tests.conftest import MemoryStore, sale


class TestPost:
    """Test posting to the ledger."""

    def test_cash_sale_example(self, cash_and_revenue):
        book = cash_and_revenue
        posted = book.post(sale(10000))

        assert posted.status is EntryStatus.POSTED
        assert posted.sequence == 1
        assert posted.posted_at is not None
        assert book.balance_as_of("Cash") == 10000
        assert book.balance_as_of("Revenue") == 10000
        assert book.trial_balance().is_balanced()

    def test_post_returns_new_value_and_keeps_draft(self, cash_and_revenue):
        draft = sale(500)
        posted = cash_and_revenue.post(draft)
        assert draft.status is EntryStatus.DRAFT
        assert posted.id == draft.id
        assert cash_and_revenue.ledger.get(draft.id) == posted

    def test_sequence_numbers_increase_without_gaps(self, cash_and_revenue):
        sequences = [cash_and_revenue.post(sale(100 + n)).sequence for n in range(5)]
        assert sequences == [1, 2, 3, 4, 5]
        assert cash_and_revenue.ledger.last_sequence == 5

    def test_unbalanced_entry_fails_validation(self, cash_and_revenue):
        entry = JournalEntry(lines=[Line.debit("Cash", 100), Line.credit("Revenue", 99)])
        with pytest.raises(ValidationFailed) as exc_info:
            cash_and_revenue.post(entry)
        assert isinstance(exc_info.value.reason, UnbalancedEntry)
        assert exc_info.value.__cause__ is exc_info.value.reason
        assert len(cash_and_revenue.ledger) == 0

    def test_validate_reports_structural_error_directly(self, cash_and_revenue):
        entry = JournalEntry(lines=[Line.debit("Cash", 100), Line.credit("Revenue", 99)])
        with pytest.raises(UnbalancedEntry):
            cash_and_revenue.validate(entry)

    def test_engine_usable_after_rejection(self, cash_and_revenue):
        with pytest.raises(ValidationFailed):
            cash_and_revenue.post(JournalEntry(lines=[Line.debit("Cash", 1)]))
        posted = cash_and_revenue.post(sale(10))
        assert posted.sequence == 1

    def test_posting_same_entry_twice(self, cash_and_revenue):
        draft = sale(100)
        cash_and_revenue.post(draft)
        with pytest.raises(AlreadyPosted):
            cash_and_revenue.post(draft)
        assert cash_and_revenue.balance_as_of("Cash") == 100

    def test_posting_a_posted_entry(self, cash_and_revenue):
        posted = cash_and_revenue.post(sale(100))
        with pytest.raises(AlreadyPosted):
            cash_and_revenue.post(posted)

    def test_lines_on_same_account_accumulate(self, cash_and_revenue):
        entry = JournalEntry(lines=[
            Line.debit("Cash", 70),
            Line.debit("Cash", 30),
            Line.credit("Revenue", 100),
        ])
        cash_and_revenue.post(entry)
        assert cash_and_revenue.balance_as_of("Cash") == 100
        assert [p.running_net for p in cash_and_revenue.ledger.postings("Cash")] == [70, 100]

    def test_draft_reversed_by_link_is_dropped(self, cash_and_revenue):
        draft = replace(sale(100), reversed_by=uuid.uuid4())
        posted = cash_and_revenue.post(draft)

        assert posted.reversed_by is None
        stored = cash_and_revenue.ledger.get(posted.id)
        assert stored.status is EntryStatus.POSTED
        assert stored.reversed_by is None
        assert not cash_and_revenue.ledger.is_reversed(posted.id)

    def test_reversal_target_must_exist(self, cash_and_revenue):
        entry = replace(sale(100), reverses=uuid.uuid4())
        with pytest.raises(UnknownEntry):
            cash_and_revenue.post(entry)


class TestDurableCommit:
    """Test the store as commit point."""

    def test_entries_are_appended_to_store(self, cash_and_revenue):
        store = MemoryStore()
        cash_and_revenue.engine.store = store
        posted = cash_and_revenue.post(sale(100))
        assert store.entries == [posted]

    def test_entry_invisible_until_store_commits(self, cash_and_revenue):
        book = cash_and_revenue
        seen = []

        def observe(entry):
            seen.append((book.ledger.last_sequence, book.balance_as_of("Cash"), entry.id in book.ledger))

        book.engine.store = MemoryStore(on_append=observe)
        book.post(sale(100))
        assert seen == [(0, 0, False)]
        assert book.balance_as_of("Cash") == 100

    def test_commit_failure_leaves_ledger_unchanged(self, cash_and_revenue):
        book = cash_and_revenue

        def fail(entry):
            raise OSError("disk full")

        book.engine.store = MemoryStore(on_append=fail)
        draft = sale(100)
        with pytest.raises(CommitFailed) as exc_info:
            book.post(draft)

        assert isinstance(exc_info.value.__cause__, OSError)
        assert draft.status is EntryStatus.DRAFT
        assert len(book.ledger) == 0
        assert draft.id not in book.ledger
        assert book.balance_as_of("Cash") == 0

    def test_draft_can_be_posted_after_commit_failure(self, cash_and_revenue):
        book = cash_and_revenue
        failures = [OSError("connection lost")]

        def fail_once(entry):
            if failures:
                raise failures.pop()

        book.engine.store = MemoryStore(on_append=fail_once)
        draft = sale(100)
        with pytest.raises(CommitFailed):
            book.post(draft)
        assert book.post(draft).sequence == 1

    def test_sequence_conflict_catches_up_and_retries(self, cash_and_revenue):
        """Another writer took sequence 1; our entry lands as 2."""
        book = cash_and_revenue
        store = MemoryStore()
        foreign = sale(40, memo="other process").mark_posted(1, book.engine.clock())
        store.entries.append(foreign)
        book.engine.store = store

        posted = book.post(sale(100))

        assert posted.sequence == 2
        assert [entry.id for entry in book.ledger.entries()] == [foreign.id, posted.id]
        assert book.balance_as_of("Cash") == 140

    def test_sequence_conflict_exhausts_retries(self, cash_and_revenue):
        book = cash_and_revenue

        def always_conflict(entry):
            raise SequenceConflict(entry.sequence)

        book.engine.store = MemoryStore(on_append=always_conflict)
        book.engine.commit_retries = 2
        with pytest.raises(CommitFailed):
            book.post(sale(100))
        assert len(book.ledger) == 0

    def test_replay_on_open(self, cash_and_revenue):
        store = MemoryStore()
        cash_and_revenue.engine.store = store
        first = cash_and_revenue.post(sale(100))
        second = cash_and_revenue.post(sale(50))

        reopened = LedgerBook(store=store)
        reopened.create_account("Cash", "Cash", AccountType.ASSET)
        reopened.create_account("Revenue", "Revenue", AccountType.REVENUE)

        assert [entry.id for entry in reopened.ledger.entries()] == [first.id, second.id]
        assert reopened.balance_as_of("Cash") == 150
        assert reopened.post(sale(1)).sequence == 3


class TestRemoveAccount:
    """Test account removal guard."""

    def test_remove_unused_account(self, cash_and_revenue):
        cash_and_revenue.create_account("Spare", "Spare", AccountType.ASSET)
        cash_and_revenue.engine.remove_account("Spare")
        assert "Spare" not in cash_and_revenue.registry

    def test_cannot_remove_posted_account(self, cash_and_revenue):
        cash_and_revenue.post(sale(100))
        with pytest.raises(AccountInUse):
            cash_and_revenue.engine.remove_account("Cash")
        assert "Cash" in cash_and_revenue.registry

    def test_remove_unknown_account(self, cash_and_revenue):
        with pytest.raises(UnknownAccount):
            cash_and_revenue.engine.remove_account("Ghost")

    def test_removed_account_cannot_be_posted_to(self, cash_and_revenue):
        cash_and_revenue.create_account("Spare", "Spare", AccountType.ASSET)
        cash_and_revenue.engine.remove_account("Spare")
        entry = JournalEntry(lines=[Line.debit("Spare", 1), Line.credit("Revenue", 1)])
        with pytest.raises(ValidationFailed):
            cash_and_revenue.post(entry)


def test_empty_entry_is_wrapped(book):
    with pytest.raises(ValidationFailed) as exc_info:
        book.post(JournalEntry(lines=[]))
    assert isinstance(exc_info.value.reason, EmptyEntry)
