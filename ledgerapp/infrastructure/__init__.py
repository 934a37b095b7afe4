"""Infrastructure layer."""

from ledgerapp.infrastructure.database import create_db_engine, init_db
from ledgerapp.infrastructure.database.models import (
    JournalEntryRecord,
    JournalLineRecord,
    LedgerAccountRecord,
)
from ledgerapp.infrastructure.database.store import SqlAccountRepository, SqlLedgerStore
