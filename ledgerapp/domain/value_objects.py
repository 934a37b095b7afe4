"""
Domain Layer - Value objects for the double-entry ledger.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import NewType
from uuid import UUID

AccountId = NewType("AccountId", str)


class AccountType(str, Enum):
    """Account classification in the chart of accounts."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    @property
    def normal_side(self) -> "Side":
        return NORMAL_SIDE[self]


class Side(str, Enum):
    """Side of a journal line."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    def opposite(self) -> "Side":
        return Side.CREDIT if self is Side.DEBIT else Side.DEBIT


class EntryStatus(str, Enum):
    """Journal entry lifecycle: DRAFT -> POSTED -> (REVERSED)."""
    DRAFT = "DRAFT"
    POSTED = "POSTED"
    REVERSED = "REVERSED"


NORMAL_SIDE: dict[AccountType, Side] = {
    AccountType.ASSET: Side.DEBIT,
    AccountType.EXPENSE: Side.DEBIT,
    AccountType.LIABILITY: Side.CREDIT,
    AccountType.EQUITY: Side.CREDIT,
    AccountType.REVENUE: Side.CREDIT,
}


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Line:
    """
    Value Object - One debit or credit line of a journal entry.

    `amount` is a magnitude in integer minor units (cents). Positivity is
    checked by the validator so that a bad line is reported, not crashed on.
    """
    account_id: AccountId
    side: Side
    amount: int
    memo: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(
                f"Line amount must be an integer number of minor units, got {self.amount!r}"
            )
        if not isinstance(self.side, Side):
            object.__setattr__(self, "side", Side(self.side))

    @classmethod
    def debit(cls, account_id: str, amount: int, memo: str = "") -> "Line":
        return cls(AccountId(account_id), Side.DEBIT, amount, memo)

    @classmethod
    def credit(cls, account_id: str, amount: int, memo: str = "") -> "Line":
        return cls(AccountId(account_id), Side.CREDIT, amount, memo)

    @property
    def signed_amount(self) -> int:
        """Amount in debit terms: debits positive, credits negative."""
        return self.amount if self.side is Side.DEBIT else -self.amount

    def mirrored(self) -> "Line":
        return replace(self, side=self.side.opposite())


@dataclass(frozen=True, slots=True)
class Posting:
    """
    A committed line as seen by the read side of the ledger.

    `running_net` is the account's cumulative debits minus credits after this
    posting, in sequence order.
    """
    sequence: int
    entry_id: UUID
    timestamp: datetime
    side: Side
    amount: int
    running_net: int

    @property
    def signed_amount(self) -> int:
        return self.amount if self.side is Side.DEBIT else -self.amount
