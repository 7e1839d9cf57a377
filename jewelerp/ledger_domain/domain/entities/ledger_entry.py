"""General ledger entry entity and account codes."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from jewelerp.common.utils.money import ZERO, to_money


class AccountCode(str, Enum):
    CASH = "1001"
    RAW_MATERIAL = "1100"
    INVENTORY = "1200"  # Finished goods
    ACCOUNTS_PAYABLE = "2000"
    SALES_REVENUE = "4001"
    COGS = "5001"
    LABOR_OVERHEAD = "5002"


ACCOUNT_NAMES: dict[str, str] = {
    AccountCode.CASH.value: "Cash/Bank",
    AccountCode.RAW_MATERIAL.value: "Raw Material Asset",
    AccountCode.INVENTORY.value: "Finished Goods Inventory",
    AccountCode.ACCOUNTS_PAYABLE.value: "Accounts Payable",
    AccountCode.SALES_REVENUE.value: "Sales Revenue",
    AccountCode.COGS.value: "Cost of Goods Sold",
    AccountCode.LABOR_OVERHEAD.value: "Labor/Overhead",
}


class AccountType(str, Enum):
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"


def account_type_for(account_code: str) -> AccountType:
    """Classifies a chart-of-accounts code by its leading digit."""
    leading = str(account_code).strip()[:1]
    if leading == "1":
        return AccountType.ASSET
    if leading == "2":
        return AccountType.LIABILITY
    if leading == "3":
        return AccountType.EQUITY
    if leading == "4":
        return AccountType.REVENUE
    return AccountType.EXPENSE


def account_name_for(account_code: str) -> str:
    return ACCOUNT_NAMES.get(str(account_code), f"Account {account_code}")


class RelatedType(str, Enum):
    INVENTORY_ITEM = "inventory_item"
    RAW_MATERIAL = "raw_material"
    PURCHASE_ORDER = "purchase_order"


@dataclass(frozen=True)
class LedgerEntry:
    """One immutable journal line. Exactly one of debit/credit is non-zero."""

    entry_date: date
    account_code: str
    description: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    related_id: Optional[int] = None
    related_type: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "account_code", str(getattr(self.account_code, "value", self.account_code)))
        object.__setattr__(self, "debit", to_money(self.debit))
        object.__setattr__(self, "credit", to_money(self.credit))
        if self.related_type is not None:
            object.__setattr__(self, "related_type", str(getattr(self.related_type, "value", self.related_type)))
        if self.debit < 0 or self.credit < 0:
            raise ValueError("Debit and credit cannot be negative.")
        if (self.debit != 0) == (self.credit != 0):
            raise ValueError("Exactly one of debit or credit must be non-zero.")

    @property
    def is_debit(self) -> bool:
        return self.debit != 0

    @property
    def amount(self) -> Decimal:
        return self.debit if self.is_debit else self.credit
