# jewelerp/ledger_domain/infrastructure/persistence/in_memory_ledger_repository.py
"""Process-local append-only ledger for tests and the `memory` storage backend."""

from dataclasses import replace
from typing import Optional

from jewelerp.ledger_domain.domain.entities.ledger_entry import LedgerEntry
from jewelerp.ledger_domain.domain.repositories.ledger_repository import ILedgerRepository


class InMemoryLedgerRepository(ILedgerRepository):

    def __init__(self, entries: Optional[list[LedgerEntry]] = None) -> None:
        self._entries: list[LedgerEntry] = []
        if entries:
            self.append_many(entries)

    def append_many(self, entries: list[LedgerEntry]) -> list[LedgerEntry]:
        next_id = len(self._entries) + 1
        stored = [replace(entry, id=next_id + offset) for offset, entry in enumerate(entries)]
        self._entries.extend(stored)
        return list(stored)

    def list_entries(self) -> list[LedgerEntry]:
        return sorted(self._entries, key=lambda e: (e.entry_date, e.id))
