"""
Domain Services - posting, balance queries and reversals over one ledger.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from .entities import Account, JournalEntry
from .exceptions import (
    AccountInUse,
    AlreadyPosted,
    AlreadyReversed,
    CommitFailed,
    ReversalMismatch,
    SequenceConflict,
    StructuralError,
    ValidationFailed,
)
from .ledger import Ledger
from .registry import AccountRegistry
from .validator import JournalEntryValidator
from .value_objects import AccountId, AccountType, EntryStatus, Side, ensure_utc, utcnow

logger = logging.getLogger(__name__)


class IAccountRepository(ABC):

    @abstractmethod
    def list_all(self) -> list[Account]:
        ...

    @abstractmethod
    def add(self, account: Account) -> Account:
        ...

    @abstractmethod
    def save(self, account: Account) -> Account:
        ...

    @abstractmethod
    def delete(self, account_id: AccountId) -> None:
        ...


class ILedgerStore(ABC):
    """
    Durable append-only storage for posted entries.

    `append` is the commit point: after it returns the entry is durable,
    if it raises nothing of the entry is. It raises SequenceConflict when the
    entry's sequence number (or reversal target) was taken by another writer
    and CommitFailed on any other durability failure.
    """

    @abstractmethod
    def append(self, entry: JournalEntry) -> None:
        ...

    @abstractmethod
    def load_entries(self, after_sequence: int = 0) -> list[JournalEntry]:
        ...


class PostingEngine:
    """
    Service - Sole writer of the ledger.

    Posts are serialized by one lock. Each post validates, takes the next
    sequence number, appends durably through the store (when there is one)
    and only then publishes the entry to the in-memory ledger.
    """

    def __init__(
        self,
        registry: AccountRegistry,
        validator: JournalEntryValidator,
        ledger: Ledger,
        store: ILedgerStore | None = None,
        clock: Callable[[], datetime] = utcnow,
        commit_retries: int = 3,
    ):
        self.registry = registry
        self.validator = validator
        self.ledger = ledger
        self.store = store
        self.clock = clock
        self.commit_retries = commit_retries
        self._write_lock = threading.Lock()

    def post(self, entry: JournalEntry) -> JournalEntry:
        if entry.status is not EntryStatus.DRAFT:
            raise AlreadyPosted(entry.id)

        with self._write_lock:
            if entry.id in self.ledger:
                raise AlreadyPosted(entry.id)
            try:
                self.validator.validate(entry)
            except StructuralError as exc:
                logger.info("Rejected entry %s: %s", entry.id, exc.code)
                raise ValidationFailed(exc) from exc

            for attempt in range(self.commit_retries + 1):
                if entry.reverses is not None:
                    self._check_reversal_target(entry)
                posted = entry.mark_posted(self.ledger.last_sequence + 1, self.clock())
                try:
                    self._persist(posted)
                except SequenceConflict:
                    logger.warning(
                        "Sequence %s taken by another writer (attempt %s), catching up",
                        posted.sequence,
                        attempt + 1,
                    )
                    self._catch_up()
                    if entry.id in self.ledger:
                        raise AlreadyPosted(entry.id) from None
                    continue
                self.ledger.append(posted)
                logger.info(
                    "Posted entry %s as #%s (%s lines, total %s)",
                    posted.id,
                    posted.sequence,
                    len(posted.lines),
                    posted.total_debit,
                )
                return posted

        raise CommitFailed(
            f"Could not commit entry {entry.id}: sequence conflict after "
            f"{self.commit_retries + 1} attempts"
        )

    def remove_account(self, account_id: str) -> Account:
        with self._write_lock:
            account = self.registry.get(account_id)
            if self.ledger.has_postings(account.id):
                raise AccountInUse(account.id)
            return self.registry.remove(account.id)

    def _check_reversal_target(self, entry: JournalEntry) -> None:
        target = self.ledger.get(entry.reverses)
        if self.ledger.is_reversed(target.id):
            raise AlreadyReversed(target.id)
        # A reversal carries exactly the target's lines with sides swapped.
        if entry.lines != tuple(line.mirrored() for line in target.lines):
            reason = ReversalMismatch(entry.id, target.id)
            logger.info("Rejected entry %s: %s", entry.id, reason.code)
            raise ValidationFailed(reason)

    def _persist(self, posted: JournalEntry) -> None:
        if self.store is None:
            return
        try:
            self.store.append(posted)
        except (SequenceConflict, CommitFailed):
            raise
        except Exception as exc:
            logger.error("Durable append of entry %s failed: %s", posted.id, exc)
            raise CommitFailed(f"Could not commit entry {posted.id}: {exc}") from exc

    def _catch_up(self) -> None:
        if self.store is None:
            return
        replayed = self.ledger.extend(
            self.store.load_entries(after_sequence=self.ledger.last_sequence)
        )
        logger.info("Replayed %s entries from store", replayed)


@dataclass(frozen=True)
class AccountActivity:
    """Debits and credits posted to one account within a period."""
    account_id: AccountId
    start: datetime | None
    end: datetime | None
    total_debit: int
    total_credit: int
    net_change: int


@dataclass(frozen=True)
class TrialBalanceRow:
    account_id: AccountId
    label: str
    account_type: AccountType
    normal_side: Side
    balance: int

    @property
    def debit(self) -> int:
        """Amount shown in the debit column."""
        net_debit = self.balance if self.normal_side is Side.DEBIT else -self.balance
        return net_debit if net_debit > 0 else 0

    @property
    def credit(self) -> int:
        net_debit = self.balance if self.normal_side is Side.DEBIT else -self.balance
        return -net_debit if net_debit < 0 else 0


@dataclass(frozen=True)
class TrialBalance:
    """
    Value Object - Trial balance at a point in time.

    `debit_normal_total` sums asset and expense balances,
    `credit_normal_total` sums liability, equity and revenue balances.
    """
    as_of: datetime | None
    sequence: int
    rows: tuple[TrialBalanceRow, ...]

    @property
    def debit_normal_total(self) -> int:
        return sum(row.balance for row in self.rows if row.normal_side is Side.DEBIT)

    @property
    def credit_normal_total(self) -> int:
        return sum(row.balance for row in self.rows if row.normal_side is Side.CREDIT)

    @property
    def total_debit(self) -> int:
        return sum(row.debit for row in self.rows)

    @property
    def total_credit(self) -> int:
        return sum(row.credit for row in self.rows)

    @property
    def difference(self) -> int:
        return self.debit_normal_total - self.credit_normal_total

    def is_balanced(self) -> bool:
        return self.difference == 0


class BalanceQueryService:
    """
    Service - Read-only balances computed from the committed ledger.
    Balances are on the account's normal side and may be negative.
    """

    def __init__(self, registry: AccountRegistry, ledger: Ledger):
        self.registry = registry
        self.ledger = ledger

    def balance_as_of(
        self,
        account_id: str,
        timestamp: datetime | None = None,
        up_to: int | None = None,
    ) -> int:
        account = self.registry.get(account_id)
        as_of = ensure_utc(timestamp) if timestamp is not None else None
        return self._balance(account, as_of, up_to)

    def balance(self, account_id: str) -> int:
        """Current running balance."""
        account = self.registry.get(account_id)
        return account.signed(self.ledger.current_net(account.id))

    def activity(
        self,
        account_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> AccountActivity:
        """Postings with start < timestamp <= end."""
        account = self.registry.get(account_id)
        start = ensure_utc(start) if start is not None else None
        end = ensure_utc(end) if end is not None else None

        total_debit = 0
        total_credit = 0
        for posting in self.ledger.postings(account.id, as_of=end):
            if start is not None and posting.timestamp <= start:
                continue
            if posting.side is Side.DEBIT:
                total_debit += posting.amount
            else:
                total_credit += posting.amount

        return AccountActivity(
            account_id=account.id,
            start=start,
            end=end,
            total_debit=total_debit,
            total_credit=total_credit,
            net_change=account.signed(total_debit - total_credit),
        )

    def trial_balance(self, as_of: datetime | None = None) -> TrialBalance:
        # One horizon for every account, so rows come from the same snapshot.
        horizon = self.ledger.last_sequence
        as_of = ensure_utc(as_of) if as_of is not None else None
        rows = tuple(
            TrialBalanceRow(
                account_id=account.id,
                label=account.label,
                account_type=account.account_type,
                normal_side=account.normal_side,
                balance=self._balance(account, as_of, up_to=horizon),
            )
            for account in self.registry.list()
        )
        return TrialBalance(as_of=as_of, sequence=horizon, rows=rows)

    def _balance(self, account: Account, as_of: datetime | None, up_to: int | None) -> int:
        if as_of is None:
            return account.signed(self.ledger.current_net(account.id, up_to=up_to))
        postings = self.ledger.postings(account.id, as_of=as_of, up_to=up_to)
        return account.signed(sum(posting.signed_amount for posting in postings))


class ReversalHandler:
    """
    Service - Corrections as compensating entries.
    The original stays in the ledger; its reversal is a new posted entry.
    """

    def __init__(self, engine: PostingEngine):
        self.engine = engine

    def reverse(
        self,
        entry_id: uuid.UUID,
        memo: str | None = None,
        timestamp: datetime | None = None,
    ) -> JournalEntry:
        ledger = self.engine.ledger
        original = ledger.get(entry_id)
        if original.status is EntryStatus.REVERSED:
            raise AlreadyReversed(entry_id)

        reversal = original.reversal(
            timestamp=timestamp if timestamp is not None else self.engine.clock(),
            memo=memo,
        )
        posted = self.engine.post(reversal)
        logger.info("Reversed entry %s with %s", entry_id, posted.id)
        return posted
