"""
Infrastructure - SQLModel table models for accounts and the posted ledger.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import BigInteger, Column, DateTime
from sqlmodel import Field, Relationship, SQLModel


class LedgerAccountRecord(SQLModel, table=True):
    """Chart of accounts."""

    __tablename__ = "ledger_account"

    id: str = Field(primary_key=True, max_length=64)
    label: str
    account_type: str
    normal_side: str
    position: int = Field(index=True)  # Insertion order
    created_at: datetime = Field(sa_type=DateTime(timezone=True))


class JournalEntryRecord(SQLModel, table=True):
    """Posted journal entry. Rows are only ever inserted."""

    __tablename__ = "journal_entry"

    id: UUID = Field(primary_key=True)
    sequence: int = Field(sa_column=Column(BigInteger, unique=True, nullable=False, index=True))
    timestamp: datetime = Field(sa_type=DateTime(timezone=True), index=True)
    memo: str = ""
    posted_at: datetime = Field(sa_type=DateTime(timezone=True))
    # Unique: an entry can be reversed once.
    reverses_id: UUID | None = Field(default=None, unique=True, foreign_key="journal_entry.id")

    lines: list["JournalLineRecord"] = Relationship(
        back_populates="journal_entry",
        sa_relationship_kwargs={"order_by": "JournalLineRecord.line_number"},
    )


class JournalLineRecord(SQLModel, table=True):
    """One debit or credit line of a posted entry."""

    __tablename__ = "journal_line"

    id: int | None = Field(default=None, primary_key=True)
    journal_entry_id: UUID = Field(foreign_key="journal_entry.id", index=True)
    line_number: int
    account_id: str = Field(foreign_key="ledger_account.id", index=True)
    side: str  # DEBIT, CREDIT
    amount: int = Field(sa_column=Column(BigInteger, nullable=False))
    memo: str = ""

    journal_entry: "JournalEntryRecord" = Relationship(back_populates="lines")
