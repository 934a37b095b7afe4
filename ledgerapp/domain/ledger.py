"""
Ledger - the append-only log of posted journal entries.

Readers never take a lock. A writer first stages everything an append
implies (entry, per-account postings, reversal marker) and then publishes it
by bumping ``_committed``; every read filters on that one counter, so an
entry is visible with all of its lines or not at all.

Only the PostingEngine appends, and it serializes its own calls.
"""

import uuid
from collections.abc import Iterable, Iterator
from datetime import datetime

from .entities import JournalEntry
from .exceptions import SequenceConflict, UnknownEntry
from .value_objects import AccountId, EntryStatus, Posting


class Ledger:

    def __init__(self) -> None:
        self._entries: list[JournalEntry] = []
        self._positions: dict[uuid.UUID, int] = {}
        self._postings: dict[AccountId, list[Posting]] = {}
        self._reversed_by: dict[uuid.UUID, tuple[uuid.UUID, int]] = {}
        self._committed = 0

    # -- write side (PostingEngine only) ---------------------------------

    def append(self, entry: JournalEntry) -> None:
        sequence = self._committed + 1
        if entry.status is not EntryStatus.POSTED or entry.sequence != sequence:
            raise SequenceConflict(
                sequence,
                f"Expected posted entry with sequence {sequence}, got {entry.sequence}",
            )

        self._entries.append(entry)
        self._positions[entry.id] = sequence - 1
        for line in entry.lines:
            postings = self._postings.setdefault(line.account_id, [])
            previous = postings[-1].running_net if postings else 0
            postings.append(
                Posting(
                    sequence=sequence,
                    entry_id=entry.id,
                    timestamp=entry.timestamp,
                    side=line.side,
                    amount=line.amount,
                    running_net=previous + line.signed_amount,
                )
            )
        if entry.reverses is not None:
            self._reversed_by[entry.reverses] = (entry.id, sequence)

        # Publish.
        self._committed = sequence

    def extend(self, entries: Iterable[JournalEntry]) -> int:
        """Replay already durable entries in sequence order."""
        count = 0
        for entry in entries:
            self.append(entry)
            count += 1
        return count

    # -- read side -------------------------------------------------------

    @property
    def last_sequence(self) -> int:
        return self._committed

    def __len__(self) -> int:
        return self._committed

    def __contains__(self, entry_id: object) -> bool:
        position = self._positions.get(entry_id)  # type: ignore[arg-type]
        return position is not None and position < self._committed

    def get(self, entry_id: uuid.UUID, up_to: int | None = None) -> JournalEntry:
        """Entry by id, with status REVERSED once its reversal is committed."""
        horizon = self._committed if up_to is None else up_to
        position = self._positions.get(entry_id)
        if position is None or position >= horizon:
            raise UnknownEntry(entry_id)
        return self._with_status(self._entries[position], horizon)

    def entries(self, up_to: int | None = None) -> Iterator[JournalEntry]:
        """Committed entries in sequence order."""
        horizon = self._committed if up_to is None else up_to
        for position in range(horizon):
            yield self._with_status(self._entries[position], horizon)

    def is_reversed(self, entry_id: uuid.UUID, up_to: int | None = None) -> bool:
        horizon = self._committed if up_to is None else up_to
        marker = self._reversed_by.get(entry_id)
        return marker is not None and marker[1] <= horizon

    def postings(
        self,
        account_id: str,
        as_of: datetime | None = None,
        up_to: int | None = None,
    ) -> list[Posting]:
        """Committed postings to an account, optionally cut at a timestamp."""
        horizon = self._committed if up_to is None else up_to
        result = []
        for posting in tuple(self._postings.get(AccountId(account_id), ())):
            if posting.sequence > horizon:
                break
            if as_of is not None and posting.timestamp > as_of:
                continue
            result.append(posting)
        return result

    def has_postings(self, account_id: str) -> bool:
        postings = self._postings.get(AccountId(account_id))
        return bool(postings) and postings[0].sequence <= self._committed

    def current_net(self, account_id: str, up_to: int | None = None) -> int:
        """Running debits minus credits for an account."""
        horizon = self._committed if up_to is None else up_to
        postings = self._postings.get(AccountId(account_id), [])
        for index in range(len(postings) - 1, -1, -1):
            if postings[index].sequence <= horizon:
                return postings[index].running_net
        return 0

    def _with_status(self, entry: JournalEntry, horizon: int) -> JournalEntry:
        marker = self._reversed_by.get(entry.id)
        if marker is not None and marker[1] <= horizon:
            return entry.mark_reversed(marker[0])
        return entry
