"""
Database engine creation and schema initialization.
"""

from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from ledgerapp.infrastructure.database.models import (
    JournalEntryRecord,
    JournalLineRecord,
    LedgerAccountRecord,
)
from ledgerapp.infrastructure.database.store import SqlAccountRepository, SqlLedgerStore


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        db_path = database_url.removeprefix("sqlite:///")
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            database_url, echo=echo, connect_args={"check_same_thread": False}
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(database_url, echo=echo)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite leaves foreign keys unenforced per connection unless asked.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_db(engine: Engine) -> None:
    """Initialize database - create all tables."""
    SQLModel.metadata.create_all(bind=engine)
