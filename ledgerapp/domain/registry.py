"""
Account Registry - the chart of accounts.
"""

import logging
import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING

from .entities import Account
from .exceptions import DuplicateAccount, UnknownAccount
from .value_objects import AccountId, AccountType

if TYPE_CHECKING:
    from .services import IAccountRepository

logger = logging.getLogger(__name__)


class AccountRegistry:
    """
    Holds accounts by id in insertion order.

    When a repository is given, existing accounts are loaded from it and every
    change is written through before it becomes visible here.
    """

    def __init__(self, repository: "IAccountRepository | None" = None):
        self.repository = repository
        self._accounts: dict[AccountId, Account] = {}
        self._lock = threading.Lock()
        if repository is not None:
            for account in repository.list_all():
                self._accounts[account.id] = account

    def create(self, account_id: str, label: str, account_type: AccountType | str) -> Account:
        with self._lock:
            if account_id in self._accounts:
                raise DuplicateAccount(account_id)
            account = Account(
                id=AccountId(account_id),
                label=label,
                account_type=AccountType(account_type),
            )
            if self.repository is not None:
                self.repository.add(account)
            self._accounts[account.id] = account
        logger.info("Created account %s (%s)", account.id, account.account_type.value)
        return account

    def get(self, account_id: str) -> Account:
        account = self._accounts.get(AccountId(account_id))
        if account is None:
            raise UnknownAccount(account_id)
        return account

    def list(self) -> Iterator[Account]:
        # Snapshot so a concurrent create() cannot break iteration.
        yield from tuple(self._accounts.values())

    def rename(self, account_id: str, label: str) -> Account:
        with self._lock:
            account = self.get(account_id).relabel(label)
            if self.repository is not None:
                self.repository.save(account)
            self._accounts[account.id] = account
        return account

    def remove(self, account_id: str) -> Account:
        """Remove without checking usage; see PostingEngine.remove_account."""
        with self._lock:
            account = self.get(account_id)
            if self.repository is not None:
                self.repository.delete(account.id)
            del self._accounts[account.id]
        logger.info("Removed account %s", account.id)
        return account

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)
