"""Data Transfer Objects for dashboard and ledger reports."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from jewelerp.ledger_domain.domain.entities.ledger_entry import AccountType


@dataclass
class DashboardMetricsDTO:
    """Headline figures shown on the executive overview."""

    finished_goods_value: Decimal
    raw_material_value: Decimal
    open_purchase_order_value: Decimal
    low_stock_count: int
    total_revenue: Decimal
    total_cogs: Decimal

    @property
    def gross_profit(self) -> Decimal:
        return self.total_revenue - self.total_cogs

    @property
    def total_inventory_value(self) -> Decimal:
        return self.finished_goods_value + self.raw_material_value


@dataclass
class TrialBalanceLineDTO:
    account_code: str
    account_name: str
    account_type: AccountType
    total_debit: Decimal
    total_credit: Decimal

    @property
    def balance(self) -> Decimal:
        """Debit-positive balance; credit-normal accounts come out negative."""
        return self.total_debit - self.total_credit


@dataclass
class TrialBalanceDTO:
    as_of: Optional[date]
    lines: list[TrialBalanceLineDTO] = field(default_factory=list)

    @property
    def total_debit(self) -> Decimal:
        return sum((line.total_debit for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.total_credit for line in self.lines), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


@dataclass
class ProfitAndLossDTO:
    start_date: date
    end_date: date
    revenue: Decimal
    cost_of_goods_sold: Decimal
    other_expenses: Decimal

    @property
    def gross_profit(self) -> Decimal:
        return self.revenue - self.cost_of_goods_sold

    @property
    def net_income(self) -> Decimal:
        return self.gross_profit - self.other_expenses


@dataclass
class IntegrityIssueDTO:
    """One inconsistency found between stock, purchase orders and the ledger."""

    kind: str  # ledger_imbalance | negative_stock | status_mismatch | unposted_receipt
    description: str
    related_id: Optional[int] = None


@dataclass
class IntegrityAuditDTO:
    checked_on: date
    issues: list[IntegrityIssueDTO] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.issues
