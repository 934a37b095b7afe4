"""
Domain Entities - Accounts and journal entries.
Entries are immutable values: each lifecycle transition returns a new entry.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime

from .value_objects import (
    AccountId,
    AccountType,
    EntryStatus,
    Line,
    Side,
    ensure_utc,
    utcnow,
)


@dataclass(frozen=True)
class Account:
    """
    Entity - Ledger account in the chart of accounts.
    Only the label may change once the account exists.
    """
    id: AccountId
    label: str
    account_type: AccountType
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not isinstance(self.account_type, AccountType):
            object.__setattr__(self, "account_type", AccountType(self.account_type))

    @property
    def normal_side(self) -> Side:
        return self.account_type.normal_side

    def signed(self, net_debit: int) -> int:
        """Express a debits-minus-credits amount on this account's normal side."""
        return net_debit if self.normal_side is Side.DEBIT else -net_debit

    def relabel(self, label: str) -> "Account":
        return replace(self, label=label)


@dataclass(frozen=True)
class JournalEntry:
    """
    Entity - Journal entry (a set of debit and credit lines).
    Double entry: total debits must equal total credits before posting.
    """
    lines: tuple[Line, ...]
    memo: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    timestamp: datetime = field(default_factory=utcnow)
    status: EntryStatus = EntryStatus.DRAFT
    sequence: int | None = None
    posted_at: datetime | None = None
    reverses: uuid.UUID | None = None
    reversed_by: uuid.UUID | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
        if self.posted_at is not None:
            object.__setattr__(self, "posted_at", ensure_utc(self.posted_at))

    @property
    def total_debit(self) -> int:
        return sum(line.amount for line in self.lines if line.side is Side.DEBIT)

    @property
    def total_credit(self) -> int:
        return sum(line.amount for line in self.lines if line.side is Side.CREDIT)

    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit

    def net_by_account(self) -> dict[AccountId, int]:
        """Debits minus credits per referenced account, in first-seen order."""
        nets: dict[AccountId, int] = {}
        for line in self.lines:
            nets[line.account_id] = nets.get(line.account_id, 0) + line.signed_amount
        return nets

    @property
    def account_ids(self) -> list[AccountId]:
        return list(self.net_by_account())

    def mark_posted(self, sequence: int, posted_at: datetime) -> "JournalEntry":
        return replace(
            self,
            status=EntryStatus.POSTED,
            sequence=sequence,
            posted_at=posted_at,
            reversed_by=None,
        )

    def mark_reversed(self, reversal_id: uuid.UUID) -> "JournalEntry":
        return replace(self, status=EntryStatus.REVERSED, reversed_by=reversal_id)

    def reversal(self, timestamp: datetime, memo: str | None = None) -> "JournalEntry":
        """Draft compensating entry: same lines, sides swapped."""
        return JournalEntry(
            lines=tuple(line.mirrored() for line in self.lines),
            memo=memo if memo is not None else f"Reversal of {self.id}",
            timestamp=timestamp,
            reverses=self.id,
        )
