"""
Infrastructure - SQL-backed account repository and ledger store.
"""

import logging

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ledgerapp.domain.entities import Account, JournalEntry
from ledgerapp.domain.exceptions import CommitFailed, DuplicateAccount, SequenceConflict
from ledgerapp.domain.services import IAccountRepository, ILedgerStore
from ledgerapp.domain.value_objects import (
    AccountId,
    AccountType,
    EntryStatus,
    Line,
    Side,
    ensure_utc,
)
from ledgerapp.infrastructure.database.models import (
    JournalEntryRecord,
    JournalLineRecord,
    LedgerAccountRecord,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_PGCODE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the insert collided with a unique key, not another constraint."""
    if getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION_PGCODE:
        return True
    message = str(exc.orig).lower()
    return "unique constraint" in message or "duplicate key" in message


class SqlAccountRepository(IAccountRepository):

    def __init__(self, engine: Engine):
        self.engine = engine

    def list_all(self) -> list[Account]:
        with Session(self.engine) as session:
            records = session.exec(
                select(LedgerAccountRecord).order_by(LedgerAccountRecord.position)
            ).all()
            return [self._to_account(record) for record in records]

    def add(self, account: Account) -> Account:
        try:
            with Session(self.engine) as session:
                last_position = session.exec(
                    select(func.max(LedgerAccountRecord.position))
                ).one()
                session.add(
                    LedgerAccountRecord(
                        id=account.id,
                        label=account.label,
                        account_type=account.account_type.value,
                        normal_side=account.normal_side.value,
                        position=(last_position or 0) + 1,
                        created_at=account.created_at,
                    )
                )
                session.commit()
        except IntegrityError as exc:
            raise DuplicateAccount(account.id) from exc
        except SQLAlchemyError as exc:
            raise CommitFailed(f"Could not add account {account.id}: {exc}") from exc
        return account

    def save(self, account: Account) -> Account:
        """Persist a label change."""
        try:
            with Session(self.engine) as session:
                record = session.get(LedgerAccountRecord, account.id)
                if record is None:
                    raise CommitFailed(f"Account {account.id} is missing from the database")
                record.label = account.label
                session.add(record)
                session.commit()
        except SQLAlchemyError as exc:
            raise CommitFailed(f"Could not save account {account.id}: {exc}") from exc
        return account

    def delete(self, account_id: AccountId) -> None:
        try:
            with Session(self.engine) as session:
                record = session.get(LedgerAccountRecord, account_id)
                if record is not None:
                    session.delete(record)
                    session.commit()
        except SQLAlchemyError as exc:
            raise CommitFailed(f"Could not delete account {account_id}: {exc}") from exc

    @staticmethod
    def _to_account(record: LedgerAccountRecord) -> Account:
        return Account(
            id=AccountId(record.id),
            label=record.label,
            account_type=AccountType(record.account_type),
            created_at=ensure_utc(record.created_at),
        )


class SqlLedgerStore(ILedgerStore):
    """
    Each append is one transaction holding the entry row and its lines, so a
    crash leaves the entry either fully present or absent.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def append(self, entry: JournalEntry) -> None:
        record = JournalEntryRecord(
            id=entry.id,
            sequence=entry.sequence,
            timestamp=entry.timestamp,
            memo=entry.memo,
            posted_at=entry.posted_at,
            reverses_id=entry.reverses,
        )
        record.lines = [
            JournalLineRecord(
                journal_entry_id=entry.id,
                line_number=number,
                account_id=line.account_id,
                side=line.side.value,
                amount=line.amount,
                memo=line.memo,
            )
            for number, line in enumerate(entry.lines, start=1)
        ]
        try:
            with Session(self.engine) as session:
                session.add(record)
                session.commit()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                # e.g. a line account removed by another process
                raise CommitFailed(f"Could not commit entry {entry.id}: {exc.orig}") from exc
            # Sequence, entry id or reversal target already taken.
            raise SequenceConflict(entry.sequence or 0) from exc
        except SQLAlchemyError as exc:
            raise CommitFailed(f"Could not commit entry {entry.id}: {exc}") from exc
        logger.debug("Stored entry %s as #%s", entry.id, entry.sequence)

    def load_entries(self, after_sequence: int = 0) -> list[JournalEntry]:
        with Session(self.engine) as session:
            statement = (
                select(JournalEntryRecord)
                .where(JournalEntryRecord.sequence > after_sequence)
                .order_by(JournalEntryRecord.sequence)
                .options(selectinload(JournalEntryRecord.lines))
            )
            return [self._to_entry(record) for record in session.exec(statement).all()]

    @staticmethod
    def _to_entry(record: JournalEntryRecord) -> JournalEntry:
        return JournalEntry(
            lines=tuple(
                Line(AccountId(line.account_id), Side(line.side), line.amount, line.memo)
                for line in sorted(record.lines, key=lambda line: line.line_number)
            ),
            memo=record.memo,
            id=record.id,
            timestamp=record.timestamp,
            status=EntryStatus.POSTED,
            sequence=record.sequence,
            posted_at=record.posted_at,
            reverses=record.reverses_id,
        )
