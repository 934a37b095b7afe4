"""
Application - LedgerBook wires the ledger components together.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from ledgerapp.config import Settings
from ledgerapp.domain.entities import Account, JournalEntry
from ledgerapp.domain.ledger import Ledger
from ledgerapp.domain.registry import AccountRegistry
from ledgerapp.domain.services import (
    AccountActivity,
    BalanceQueryService,
    IAccountRepository,
    ILedgerStore,
    PostingEngine,
    ReversalHandler,
    TrialBalance,
)
from ledgerapp.domain.validator import JournalEntryValidator
from ledgerapp.domain.value_objects import AccountType, utcnow

logger = logging.getLogger(__name__)

DEFAULT_CHART: list[tuple[str, str, AccountType]] = [
    ("1000", "Cash", AccountType.ASSET),
    ("1100", "Bank", AccountType.ASSET),
    ("1200", "Accounts receivable", AccountType.ASSET),
    ("1300", "Inventory", AccountType.ASSET),
    ("2000", "Accounts payable", AccountType.LIABILITY),
    ("2100", "Tax payable", AccountType.LIABILITY),
    ("3000", "Owner's capital", AccountType.EQUITY),
    ("3100", "Retained earnings", AccountType.EQUITY),
    ("4000", "Sales revenue", AccountType.REVENUE),
    ("4100", "Service revenue", AccountType.REVENUE),
    ("5000", "Cost of goods sold", AccountType.EXPENSE),
    ("6000", "Salaries expense", AccountType.EXPENSE),
    ("6100", "Rent expense", AccountType.EXPENSE),
]


class LedgerBook:
    """One chart of accounts, one ledger and the services over them."""

    def __init__(
        self,
        account_repository: IAccountRepository | None = None,
        store: ILedgerStore | None = None,
        reject_zero_net: bool = True,
        commit_retries: int = 3,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.registry = AccountRegistry(account_repository)
        self.ledger = Ledger()
        if store is not None:
            replayed = self.ledger.extend(store.load_entries())
            logger.info(
                "Loaded %s accounts and %s entries from store", len(self.registry), replayed
            )
        self.validator = JournalEntryValidator(self.registry, reject_zero_net=reject_zero_net)
        self.engine = PostingEngine(
            self.registry,
            self.validator,
            self.ledger,
            store=store,
            clock=clock,
            commit_retries=commit_retries,
        )
        self.queries = BalanceQueryService(self.registry, self.ledger)
        self.reversals = ReversalHandler(self.engine)

    @classmethod
    def open(cls, settings: Settings | None = None) -> "LedgerBook":
        """Build a book from settings, replaying the durable store if configured."""
        settings = settings or Settings.from_env()
        account_repository = None
        store = None
        if settings.is_persistent:
            from ledgerapp.infrastructure.database import (
                SqlAccountRepository,
                SqlLedgerStore,
                create_db_engine,
                init_db,
            )

            engine = create_db_engine(settings.database_url)
            init_db(engine)
            account_repository = SqlAccountRepository(engine)
            store = SqlLedgerStore(engine)

        book = cls(
            account_repository=account_repository,
            store=store,
            reject_zero_net=settings.reject_zero_net,
            commit_retries=settings.commit_retries,
        )
        if settings.seed_default_accounts:
            seed_default_accounts(book)
        return book

    def create_account(self, account_id: str, label: str, account_type: AccountType | str) -> Account:
        return self.registry.create(account_id, label, account_type)

    def validate(self, entry: JournalEntry) -> None:
        self.validator.validate(entry)

    def post(self, entry: JournalEntry) -> JournalEntry:
        return self.engine.post(entry)

    def reverse(
        self,
        entry_id: uuid.UUID,
        memo: str | None = None,
        timestamp: datetime | None = None,
    ) -> JournalEntry:
        return self.reversals.reverse(entry_id, memo=memo, timestamp=timestamp)

    def balance_as_of(self, account_id: str, timestamp: datetime | None = None) -> int:
        return self.queries.balance_as_of(account_id, timestamp)

    def activity(
        self,
        account_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> AccountActivity:
        return self.queries.activity(account_id, start, end)

    def trial_balance(self, as_of: datetime | None = None) -> TrialBalance:
        return self.queries.trial_balance(as_of)


def seed_default_accounts(book: LedgerBook) -> list[Account]:
    """Add the default chart of accounts, skipping ids that already exist."""
    created = []
    for account_id, label, account_type in DEFAULT_CHART:
        if account_id in book.registry:
            continue
        created.append(book.create_account(account_id, label, account_type))
    logger.info("Seeded %s default accounts", len(created))
    return created
