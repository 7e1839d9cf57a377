# jewelerp/ledger_domain/domain/repositories/ledger_repository.py
"""General ledger repository interface. Entries are append-only."""
from abc import ABC, abstractmethod

from jewelerp.ledger_domain.domain.entities.ledger_entry import LedgerEntry


class ILedgerRepository(ABC):

    @abstractmethod
    def append_many(self, entries: list[LedgerEntry]) -> list[LedgerEntry]:
        """
        Appends all entries of one business event in a single write.
        Returns the stored entries with their ids.
        """
        pass

    @abstractmethod
    def list_entries(self) -> list[LedgerEntry]:
        """Retrieves all ledger entries ordered by entry date."""
        pass
