"""
API DTOs - Data Transfer Objects for API requests/responses.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ledgerapp.domain.entities import Account, JournalEntry
from ledgerapp.domain.services import AccountActivity, TrialBalance
from ledgerapp.domain.value_objects import AccountType, EntryStatus, Line, Side


class AccountCreateDTO(BaseModel):
    """DTO - Register an account."""
    id: str = Field(..., min_length=1, max_length=64, description="Account id")
    label: str = Field(..., min_length=1, max_length=200, description="Human readable name")
    account_type: AccountType = Field(..., description="ASSET, LIABILITY, EQUITY, REVENUE, EXPENSE")


class AccountRenameDTO(BaseModel):
    """DTO - Change an account label."""
    label: str = Field(..., min_length=1, max_length=200)


class AccountResponseDTO(BaseModel):
    """DTO - Account."""
    id: str
    label: str
    account_type: AccountType
    normal_side: Side
    created_at: datetime

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponseDTO":
        return cls(
            id=account.id,
            label=account.label,
            account_type=account.account_type,
            normal_side=account.normal_side,
            created_at=account.created_at,
        )


class LineDTO(BaseModel):
    """DTO - Journal line. Amount in minor units (cents)."""
    account_id: str = Field(..., description="Account id")
    side: Side = Field(..., description="DEBIT or CREDIT")
    amount: int = Field(..., description="Magnitude in minor units")
    memo: str = ""

    model_config = ConfigDict(from_attributes=True)

    def to_domain(self) -> Line:
        return Line(self.account_id, self.side, self.amount, self.memo)


class JournalEntryCreateDTO(BaseModel):
    """DTO - Candidate journal entry."""
    id: UUID | None = Field(None, description="Client supplied id; resubmitting it is rejected")
    timestamp: datetime | None = Field(None, description="Economic date of the entry")
    memo: str = Field("", max_length=500)
    lines: list[LineDTO] = Field(..., description="Debit and credit lines")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "memo": "Cash sale",
            "timestamp": "2026-10-01T09:30:00Z",
            "lines": [
                {"account_id": "1000", "side": "DEBIT", "amount": 10000},
                {"account_id": "4000", "side": "CREDIT", "amount": 10000},
            ],
        }
    })

    def to_domain(self) -> JournalEntry:
        values = {
            "lines": tuple(line.to_domain() for line in self.lines),
            "memo": self.memo,
        }
        if self.id is not None:
            values["id"] = self.id
        if self.timestamp is not None:
            values["timestamp"] = self.timestamp
        return JournalEntry(**values)


class JournalEntryResponseDTO(BaseModel):
    """DTO - Journal entry."""
    id: UUID
    sequence: int | None
    timestamp: datetime
    memo: str
    status: EntryStatus
    posted_at: datetime | None
    reverses: UUID | None
    reversed_by: UUID | None
    total_debit: int
    total_credit: int
    lines: list[LineDTO]

    @classmethod
    def from_domain(cls, entry: JournalEntry) -> "JournalEntryResponseDTO":
        return cls(
            id=entry.id,
            sequence=entry.sequence,
            timestamp=entry.timestamp,
            memo=entry.memo,
            status=entry.status,
            posted_at=entry.posted_at,
            reverses=entry.reverses,
            reversed_by=entry.reversed_by,
            total_debit=entry.total_debit,
            total_credit=entry.total_credit,
            lines=[LineDTO.model_validate(line) for line in entry.lines],
        )


class ReversalRequestDTO(BaseModel):
    """DTO - Reverse a posted entry."""
    memo: str | None = Field(None, max_length=500)
    timestamp: datetime | None = None


class BalanceCheckResultDTO(BaseModel):
    """DTO - Validation result for a candidate entry."""
    is_valid: bool
    total_debit: int
    total_credit: int
    difference: int
    errors: list[str] = []


class BalanceResponseDTO(BaseModel):
    """DTO - Account balance on its normal side."""
    account_id: str
    as_of: datetime | None
    normal_side: Side
    balance: int


class ActivityResponseDTO(BaseModel):
    """DTO - Period activity."""
    account_id: str
    start: datetime | None
    end: datetime | None
    total_debit: int
    total_credit: int
    net_change: int

    @classmethod
    def from_domain(cls, activity: AccountActivity) -> "ActivityResponseDTO":
        return cls(
            account_id=activity.account_id,
            start=activity.start,
            end=activity.end,
            total_debit=activity.total_debit,
            total_credit=activity.total_credit,
            net_change=activity.net_change,
        )


class TrialBalanceRowDTO(BaseModel):
    account_id: str
    label: str
    account_type: AccountType
    normal_side: Side
    balance: int
    debit: int
    credit: int


class TrialBalanceDTO(BaseModel):
    """DTO - Trial balance."""
    as_of: datetime | None
    sequence: int
    accounts: list[TrialBalanceRowDTO]
    debit_normal_total: int
    credit_normal_total: int
    total_debit: int
    total_credit: int
    difference: int
    is_balanced: bool

    @classmethod
    def from_domain(cls, trial_balance: TrialBalance) -> "TrialBalanceDTO":
        return cls(
            as_of=trial_balance.as_of,
            sequence=trial_balance.sequence,
            accounts=[
                TrialBalanceRowDTO(
                    account_id=row.account_id,
                    label=row.label,
                    account_type=row.account_type,
                    normal_side=row.normal_side,
                    balance=row.balance,
                    debit=row.debit,
                    credit=row.credit,
                )
                for row in trial_balance.rows
            ],
            debit_normal_total=trial_balance.debit_normal_total,
            credit_normal_total=trial_balance.credit_normal_total,
            total_debit=trial_balance.total_debit,
            total_credit=trial_balance.total_credit,
            difference=trial_balance.difference,
            is_balanced=trial_balance.is_balanced(),
        )
