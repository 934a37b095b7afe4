"""Domain layer - Pure Python ledger logic."""

from ledgerapp.domain.entities import Account, JournalEntry
from ledgerapp.domain.exceptions import (
    AccountInUse,
    AlreadyPosted,
    AlreadyReversed,
    CommitFailed,
    DuplicateAccount,
    EmptyEntry,
    LedgerError,
    LifecycleError,
    NonPositiveAmount,
    ReversalMismatch,
    SequenceConflict,
    StructuralError,
    UnbalancedEntry,
    UnknownAccount,
    UnknownAccountReference,
    UnknownEntry,
    ValidationFailed,
    ZeroNetEntry,
)
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
    TrialBalanceRow,
)
from ledgerapp.domain.validator import JournalEntryValidator
from ledgerapp.domain.value_objects import (
    AccountId,
    AccountType,
    EntryStatus,
    Line,
    Posting,
    Side,
)
