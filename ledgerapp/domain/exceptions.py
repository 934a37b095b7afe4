"""
Typed exceptions for the ledger core.

Every error carries a machine-readable ``code`` and the HTTP ``status_code``
the API adapter answers with. Hierarchy::

    LedgerError
    +-- StructuralError          (caller fixes the entry and resubmits)
    |   +-- EmptyEntry
    |   +-- NonPositiveAmount
    |   +-- UnknownAccountReference
    |   +-- UnbalancedEntry
    |   +-- ZeroNetEntry
    |   +-- ReversalMismatch
    +-- ValidationFailed         (post() wrapper around a StructuralError)
    +-- LifecycleError           (caller/state mismatch, never retried)
    |   +-- AlreadyPosted
    |   +-- AlreadyReversed
    |   +-- UnknownEntry
    |   +-- DuplicateAccount
    |   +-- UnknownAccount
    |   +-- AccountInUse
    +-- CommitFailed             (durable append did not happen)
    +-- SequenceConflict         (another writer took the sequence number)
"""

from uuid import UUID


class LedgerError(Exception):
    """Base class for all ledger errors."""

    code: str = "LEDGER_ERROR"
    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class StructuralError(LedgerError):
    status_code = 422


class EmptyEntry(StructuralError):
    code = "EMPTY_ENTRY"

    def __init__(self, line_count: int):
        self.line_count = line_count
        super().__init__(f"Journal entry needs at least 2 lines, got {line_count}")


class NonPositiveAmount(StructuralError):
    code = "NON_POSITIVE_AMOUNT"

    def __init__(self, line_index: int, amount: int):
        self.line_index = line_index
        self.amount = amount
        super().__init__(f"Line {line_index}: amount must be positive, got {amount}")


class UnknownAccountReference(StructuralError):
    code = "UNKNOWN_ACCOUNT_REFERENCE"

    def __init__(self, line_index: int, account_id: str):
        self.line_index = line_index
        self.account_id = account_id
        super().__init__(f"Line {line_index}: account {account_id!r} is not registered")


class UnbalancedEntry(StructuralError):
    code = "UNBALANCED_ENTRY"

    def __init__(self, total_debit: int, total_credit: int):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Entry is not balanced: debits {total_debit} != credits {total_credit}"
        )


class ZeroNetEntry(StructuralError):
    code = "ZERO_NET_ENTRY"

    def __init__(self):
        super().__init__("Entry has no economic effect: every account nets to zero")


class ReversalMismatch(StructuralError):
    code = "REVERSAL_MISMATCH"

    def __init__(self, entry_id: UUID, target_id: UUID):
        self.entry_id = entry_id
        self.target_id = target_id
        super().__init__(
            f"Entry {entry_id} does not mirror the lines of entry {target_id} it reverses"
        )


class ValidationFailed(LedgerError):
    code = "VALIDATION_FAILED"
    status_code = 422

    def __init__(self, reason: StructuralError):
        self.reason = reason
        super().__init__(f"Validation failed ({reason.code}): {reason.message}")


class LifecycleError(LedgerError):
    status_code = 409


class AlreadyPosted(LifecycleError):
    code = "ALREADY_POSTED"

    def __init__(self, entry_id: UUID):
        self.entry_id = entry_id
        super().__init__(f"Journal entry {entry_id} has already been posted")


class AlreadyReversed(LifecycleError):
    code = "ALREADY_REVERSED"

    def __init__(self, entry_id: UUID):
        self.entry_id = entry_id
        super().__init__(f"Journal entry {entry_id} has already been reversed")


class UnknownEntry(LifecycleError):
    code = "UNKNOWN_ENTRY"
    status_code = 404

    def __init__(self, entry_id: UUID):
        self.entry_id = entry_id
        super().__init__(f"No posted journal entry {entry_id}")


class DuplicateAccount(LifecycleError):
    code = "DUPLICATE_ACCOUNT"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id!r} already exists")


class UnknownAccount(LifecycleError):
    code = "UNKNOWN_ACCOUNT"
    status_code = 404

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id!r} is not registered")


class AccountInUse(LifecycleError):
    code = "ACCOUNT_IN_USE"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id!r} has posted lines and cannot be removed")


class CommitFailed(LedgerError):
    code = "COMMIT_FAILED"
    status_code = 503


class SequenceConflict(LedgerError):
    code = "SEQUENCE_CONFLICT"
    status_code = 409

    def __init__(self, sequence: int, message: str | None = None):
        self.sequence = sequence
        super().__init__(message or f"Sequence number {sequence} is already taken")
