"""Application layer - Composition root and DTOs."""

from ledgerapp.application.book import DEFAULT_CHART, LedgerBook, seed_default_accounts
from ledgerapp.application.dto.accounting_dto import (
    AccountCreateDTO,
    AccountResponseDTO,
    BalanceCheckResultDTO,
    JournalEntryCreateDTO,
    JournalEntryResponseDTO,
    TrialBalanceDTO,
)
