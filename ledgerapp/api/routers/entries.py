"""
API Routers - Accounts and journal entries.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from ledgerapp.api.deps import get_book
from ledgerapp.application.book import LedgerBook
from ledgerapp.application.dto.accounting_dto import (
    AccountCreateDTO,
    AccountRenameDTO,
    AccountResponseDTO,
    BalanceCheckResultDTO,
    JournalEntryCreateDTO,
    JournalEntryResponseDTO,
    ReversalRequestDTO,
)

router = APIRouter(prefix="/api/v1", tags=["Ledger"])


@router.post("/accounts", response_model=AccountResponseDTO, status_code=status.HTTP_201_CREATED)
def create_account(dto: AccountCreateDTO, book: LedgerBook = Depends(get_book)):
    """Register an account. The id must be unused."""
    account = book.create_account(dto.id, dto.label, dto.account_type)
    return AccountResponseDTO.from_domain(account)


@router.get("/accounts", response_model=list[AccountResponseDTO])
def list_accounts(book: LedgerBook = Depends(get_book)):
    """Chart of accounts in registration order."""
    return [AccountResponseDTO.from_domain(account) for account in book.registry.list()]


@router.get("/accounts/{account_id}", response_model=AccountResponseDTO)
def get_account(account_id: str, book: LedgerBook = Depends(get_book)):
    return AccountResponseDTO.from_domain(book.registry.get(account_id))


@router.patch("/accounts/{account_id}", response_model=AccountResponseDTO)
def rename_account(account_id: str, dto: AccountRenameDTO, book: LedgerBook = Depends(get_book)):
    """Change the label; type and id are fixed."""
    return AccountResponseDTO.from_domain(book.registry.rename(account_id, dto.label))


@router.delete("/accounts/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(account_id: str, book: LedgerBook = Depends(get_book)):
    """Remove an account that has never been posted to."""
    book.engine.remove_account(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/entries/validate", response_model=BalanceCheckResultDTO)
def validate_entry(dto: JournalEntryCreateDTO, book: LedgerBook = Depends(get_book)):
    """
    Check a candidate entry without posting it.

    - At least two lines, positive amounts, registered accounts
    - Total debits = total credits
    """
    entry = dto.to_domain()
    is_valid, errors = book.validator.check(entry)
    return BalanceCheckResultDTO(
        is_valid=is_valid,
        total_debit=entry.total_debit,
        total_credit=entry.total_credit,
        difference=entry.total_debit - entry.total_credit,
        errors=errors,
    )


@router.post("/entries", response_model=JournalEntryResponseDTO, status_code=status.HTTP_201_CREATED)
def post_entry(dto: JournalEntryCreateDTO, book: LedgerBook = Depends(get_book)):
    """
    Post a journal entry to the ledger.

    - All lines become visible together or not at all
    - The same entry id can be posted only once
    """
    posted = book.post(dto.to_domain())
    return JournalEntryResponseDTO.from_domain(posted)


@router.get("/entries", response_model=list[JournalEntryResponseDTO])
def list_entries(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    book: LedgerBook = Depends(get_book),
):
    """Posted entries in sequence order."""
    entries = []
    for index, entry in enumerate(book.ledger.entries()):
        if index < skip:
            continue
        if len(entries) >= limit:
            break
        entries.append(JournalEntryResponseDTO.from_domain(entry))
    return entries


@router.get("/entries/{entry_id}", response_model=JournalEntryResponseDTO)
def get_entry(entry_id: UUID, book: LedgerBook = Depends(get_book)):
    return JournalEntryResponseDTO.from_domain(book.ledger.get(entry_id))


@router.post(
    "/entries/{entry_id}/reverse",
    response_model=JournalEntryResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
def reverse_entry(
    entry_id: UUID,
    dto: ReversalRequestDTO | None = None,
    book: LedgerBook = Depends(get_book),
):
    """Post a compensating entry. The original stays in the ledger, marked reversed."""
    dto = dto or ReversalRequestDTO()
    reversal = book.reverse(entry_id, memo=dto.memo, timestamp=dto.timestamp)
    return JournalEntryResponseDTO.from_domain(reversal)
