"""
API Routers - Balance and trial balance reports (read only).
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from ledgerapp.api.deps import get_book
from ledgerapp.application.book import LedgerBook
from ledgerapp.application.dto.accounting_dto import (
    ActivityResponseDTO,
    BalanceResponseDTO,
    TrialBalanceDTO,
)

router = APIRouter(prefix="/api/v1/reports", tags=["Reports"])


@router.get("/balances/{account_id}", response_model=BalanceResponseDTO)
def get_balance(
    account_id: str,
    as_of: datetime | None = Query(None, description="Include entries dated up to this instant"),
    book: LedgerBook = Depends(get_book),
):
    """Balance on the account's normal side; negative means an abnormal position."""
    account = book.registry.get(account_id)
    return BalanceResponseDTO(
        account_id=account.id,
        as_of=as_of,
        normal_side=account.normal_side,
        balance=book.balance_as_of(account.id, as_of),
    )


@router.get("/activity/{account_id}", response_model=ActivityResponseDTO)
def get_activity(
    account_id: str,
    start: datetime | None = Query(None, description="Exclusive lower bound"),
    end: datetime | None = Query(None, description="Inclusive upper bound"),
    book: LedgerBook = Depends(get_book),
):
    """Debits, credits and net change within a period."""
    return ActivityResponseDTO.from_domain(book.activity(account_id, start, end))


@router.get("/trial-balance", response_model=TrialBalanceDTO)
def get_trial_balance(
    as_of: datetime | None = Query(None, description="Include entries dated up to this instant"),
    book: LedgerBook = Depends(get_book),
):
    """
    Trial balance: assets + expenses = liabilities + equity + revenue.
    """
    return TrialBalanceDTO.from_domain(book.trial_balance(as_of))
