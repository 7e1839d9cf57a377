# jewelerp/ledger_domain/domain/services/journal_builder.py
"""Assembles the balanced set of ledger entries for one business event."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from jewelerp.common.exceptions.custom_exceptions import LedgerImbalanceError
from jewelerp.common.utils.money import ZERO, to_money
from jewelerp.ledger_domain.domain.entities.ledger_entry import LedgerEntry

logger = logging.getLogger(__name__)


def total_debits(entries: Iterable[LedgerEntry]) -> Decimal:
    return sum((e.debit for e in entries), ZERO)


def total_credits(entries: Iterable[LedgerEntry]) -> Decimal:
    return sum((e.credit for e in entries), ZERO)


def assert_balanced(entries: list[LedgerEntry]) -> None:
    """Raises LedgerImbalanceError unless debits equal credits."""
    debit_sum = total_debits(entries)
    credit_sum = total_credits(entries)
    if debit_sum != credit_sum:
        raise LedgerImbalanceError(debit_sum, credit_sum)


class JournalEntryBuilder:
    """
    Collects debit and credit lines sharing one entry date.

    Zero-amount lines are dropped, since a ledger row must carry exactly one
    non-zero side. A negative amount is posted on the opposite side.
    """

    def __init__(
        self, entry_date: date, related_id: Optional[int] = None, related_type: Optional[str] = None
    ) -> None:
        self.entry_date = entry_date
        self.related_id = related_id
        self.related_type = related_type
        self._entries: list[LedgerEntry] = []

    def debit(self, account_code: Any, amount: Any, description: str, **related: Any) -> "JournalEntryBuilder":
        return self._add(account_code, to_money(amount), description, related)

    def credit(self, account_code: Any, amount: Any, description: str, **related: Any) -> "JournalEntryBuilder":
        return self._add(account_code, -to_money(amount), description, related)

    def _add(self, account_code: Any, signed_amount: Decimal, description: str, related: dict) -> "JournalEntryBuilder":
        # Positive = debit, negative = credit
        if signed_amount == 0:
            logger.debug(f"Skipping zero-amount line on account {account_code}: {description}")
            return self
        self._entries.append(
            LedgerEntry(
                entry_date=self.entry_date,
                account_code=account_code,
                description=description,
                debit=signed_amount if signed_amount > 0 else ZERO,
                credit=-signed_amount if signed_amount < 0 else ZERO,
                related_id=related.get("related_id", self.related_id),
                related_type=related.get("related_type", self.related_type),
            )
        )
        return self

    def build(self) -> list[LedgerEntry]:
        """Returns the entries after checking the balance invariant."""
        entries = list(self._entries)
        assert_balanced(entries)
        return entries
