"""
Journal Entry Validator - structural checks before posting.
"""

from .entities import JournalEntry
from .exceptions import (
    EmptyEntry,
    NonPositiveAmount,
    StructuralError,
    UnbalancedEntry,
    UnknownAccountReference,
    ZeroNetEntry,
)
from .registry import AccountRegistry


class JournalEntryValidator:
    """
    Pure checks on a candidate entry. Never touches the ledger.

    Checks run in a fixed order and the first failure is raised:
    line count, amounts, account references, balance, zero net effect.
    """

    def __init__(self, registry: AccountRegistry, reject_zero_net: bool = True):
        self.registry = registry
        self.reject_zero_net = reject_zero_net

    def validate(self, entry: JournalEntry) -> None:
        if len(entry.lines) < 2:
            raise EmptyEntry(len(entry.lines))

        for index, line in enumerate(entry.lines):
            if line.amount <= 0:
                raise NonPositiveAmount(index, line.amount)

        for index, line in enumerate(entry.lines):
            if line.account_id not in self.registry:
                raise UnknownAccountReference(index, line.account_id)

        total_debit = entry.total_debit
        total_credit = entry.total_credit
        if total_debit != total_credit:
            raise UnbalancedEntry(total_debit, total_credit)

        if self.reject_zero_net and not any(entry.net_by_account().values()):
            raise ZeroNetEntry()

    def check(self, entry: JournalEntry) -> tuple[bool, list[str]]:
        """
        Report-style validation.
        Returns (is_valid, errors) instead of raising.
        """
        try:
            self.validate(entry)
        except StructuralError as exc:
            return False, [exc.message]
        return True, []
