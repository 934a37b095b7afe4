"""
Configuration read from environment variables.
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_engine_url(database_type: str | None = None) -> str:
    """Build the database URL from environment."""
    db_type = database_type or os.getenv("DATABASE_TYPE", "sqlite")

    if db_type == "sqlite":
        db_path = os.getenv("DATABASE_PATH", "./data/ledger.db")
        return f"sqlite:///{db_path}"
    elif db_type == "postgresql":
        host = os.getenv("DB_HOST", "localhost")
        port = os.getenv("DB_PORT", "5432")
        dbname = os.getenv("DB_NAME", "ledger")
        user = os.getenv("DB_USER", "postgres")
        password = os.getenv("DB_PASSWORD", "postgres")
        return f"postgresql://{user}:{password}@{host}:{port}/{dbname}"
    else:
        raise ValueError(f"Unsupported database type: {db_type}")


@dataclass(frozen=True)
class Settings:
    database_type: str = "memory"
    database_url: str | None = None
    reject_zero_net: bool = True
    commit_retries: int = 3
    seed_default_accounts: bool = False
    log_level: str = "INFO"

    @property
    def is_persistent(self) -> bool:
        return self.database_type != "memory"

    @classmethod
    def from_env(cls) -> "Settings":
        database_type = os.getenv("DATABASE_TYPE", "memory")
        return cls(
            database_type=database_type,
            database_url=get_engine_url(database_type) if database_type != "memory" else None,
            reject_zero_net=_env_bool("LEDGER_REJECT_ZERO_NET", True),
            commit_retries=int(os.getenv("LEDGER_COMMIT_RETRIES", "3")),
            seed_default_accounts=_env_bool("LEDGER_SEED_DEFAULT_ACCOUNTS", False),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
