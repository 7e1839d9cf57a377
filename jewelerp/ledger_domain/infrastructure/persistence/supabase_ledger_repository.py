# jewelerp/ledger_domain/infrastructure/persistence/supabase_ledger_repository.py
"""General ledger backed by the storefront's Supabase table."""

from typing import Optional

from jewelerp.common.exceptions.custom_exceptions import APIError
from jewelerp.common.infrastructure.supabase_rest_client import SupabaseRestClient
from jewelerp.ledger_domain.domain.entities.ledger_entry import LedgerEntry
from jewelerp.ledger_domain.domain.repositories.ledger_repository import ILedgerRepository
from jewelerp.ledger_domain.infrastructure.persistence.mysql_ledger_repository import (
    ledger_entry_from_row,
)


class SupabaseLedgerRepository(ILedgerRepository):
    table = "general_ledger_entries"

    def __init__(self, client: Optional[SupabaseRestClient] = None) -> None:
        self.client = client or SupabaseRestClient()

    def append_many(self, entries: list[LedgerEntry]) -> list[LedgerEntry]:
        """One bulk insert per event; PostgREST runs it as a single statement."""
        if not entries:
            return []
        rows = [
            {
                "entry_date": entry.entry_date,
                "account_code": entry.account_code,
                "description": entry.description,
                "debit": entry.debit,
                "credit": entry.credit,
                "related_id": entry.related_id,
                "related_type": entry.related_type,
            }
            for entry in entries
        ]
        stored = self.client.insert(self.table, rows)
        if len(stored) != len(entries):
            raise APIError(f"Expected {len(entries)} ledger rows back, got {len(stored)}", outcome_unknown=True)
        return [ledger_entry_from_row(row) for row in stored]

    def list_entries(self) -> list[LedgerEntry]:
        return [ledger_entry_from_row(row) for row in self.client.select(self.table, order="entry_date.asc,id.asc")]
