# jewelerp/reporting_domain/application/reporting_service.py
"""Read-only reports over stock, purchase orders and the general ledger."""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional

from jewelerp.common.dtos.report_dtos import (
    DashboardMetricsDTO,
    IntegrityAuditDTO,
    IntegrityIssueDTO,
    ProfitAndLossDTO,
    TrialBalanceDTO,
    TrialBalanceLineDTO,
)
from jewelerp.common.exceptions.custom_exceptions import ValidationError
from jewelerp.common.utils.date_utils import local_business_date
from jewelerp.common.utils.money import ZERO
from jewelerp.costing_domain.domain.services.costing_service import inventory_value
from jewelerp.inventory_domain.domain.entities.stock_item import StockItem
from jewelerp.inventory_domain.domain.repositories.raw_material_repository import IRawMaterialRepository
from jewelerp.inventory_domain.domain.repositories.stock_item_repository import IStockItemRepository
from jewelerp.inventory_domain.domain.services.stock_status_service import normalize_stock_status
from jewelerp.ledger_domain.domain.entities.ledger_entry import (
    AccountCode,
    AccountType,
    LedgerEntry,
    RelatedType,
    account_name_for,
    account_type_for,
)
from jewelerp.ledger_domain.domain.repositories.ledger_repository import ILedgerRepository
from jewelerp.ledger_domain.domain.services.journal_builder import total_credits, total_debits
from jewelerp.purchasing_domain.domain.entities.purchase_order import PurchaseOrderStatus
from jewelerp.purchasing_domain.domain.repositories.purchase_order_repository import IPurchaseOrderRepository

logger = logging.getLogger(__name__)


def _net_credit(entries: list[LedgerEntry]) -> Decimal:
    return total_credits(entries) - total_debits(entries)


def _net_debit(entries: list[LedgerEntry]) -> Decimal:
    return total_debits(entries) - total_credits(entries)


class ReportingApplicationService:
    """Dashboard metrics, trial balance, profit and loss and the integrity audit."""

    def __init__(
        self,
        stock_item_repo: IStockItemRepository,
        raw_material_repo: IRawMaterialRepository,
        ledger_repo: ILedgerRepository,
        purchase_order_repo: IPurchaseOrderRepository,
    ) -> None:
        """Initializes the ReportingApplicationService."""
        self.stock_item_repo = stock_item_repo
        self.raw_material_repo = raw_material_repo
        self.ledger_repo = ledger_repo
        self.purchase_order_repo = purchase_order_repo

    def get_dashboard_metrics(self) -> DashboardMetricsDTO:
        items = self.stock_item_repo.get_all_stock_items()
        materials = self.raw_material_repo.get_all_raw_materials()
        purchase_orders = self.purchase_order_repo.get_all_purchase_orders()
        entries = self.ledger_repo.list_entries()

        revenue_entries = [e for e in entries if account_type_for(e.account_code) == AccountType.REVENUE]
        cogs_entries = [e for e in entries if e.account_code == AccountCode.COGS.value]

        return DashboardMetricsDTO(
            finished_goods_value=sum((inventory_value(i.quantity_available, i.unit_cost) for i in items), ZERO),
            raw_material_value=sum((inventory_value(m.quantity_on_hand, m.unit_cost) for m in materials), ZERO),
            open_purchase_order_value=sum((po.total_amount for po in purchase_orders if po.is_open), ZERO),
            low_stock_count=sum(1 for item in items if item.is_low_stock),
            total_revenue=_net_credit(revenue_entries),
            total_cogs=_net_debit(cogs_entries),
        )

    def get_low_stock_items(self) -> list[StockItem]:
        """Items at or below their reorder threshold."""
        return [item for item in self.stock_item_repo.get_all_stock_items() if item.is_low_stock]

    def get_trial_balance(self, as_of: Optional[date] = None) -> TrialBalanceDTO:
        """Per-account debit and credit totals, optionally up to and including `as_of`."""
        by_account: dict[str, list[LedgerEntry]] = defaultdict(list)
        for entry in self.ledger_repo.list_entries():
            if as_of is None or entry.entry_date <= as_of:
                by_account[entry.account_code].append(entry)

        lines = [
            TrialBalanceLineDTO(
                account_code=code,
                account_name=account_name_for(code),
                account_type=account_type_for(code),
                total_debit=total_debits(account_entries),
                total_credit=total_credits(account_entries),
            )
            for code, account_entries in sorted(by_account.items())
        ]
        trial_balance = TrialBalanceDTO(as_of=as_of, lines=lines)
        if not trial_balance.is_balanced:
            logger.warning(
                f"Trial balance does not balance: debits {trial_balance.total_debit} "
                f"!= credits {trial_balance.total_credit}"
            )
        return trial_balance

    def get_profit_and_loss(self, start_date: date, end_date: date) -> ProfitAndLossDTO:
        """Revenue, COGS and other expenses for entries dated within [start_date, end_date]."""
        if start_date > end_date:
            raise ValidationError(f"Start date {start_date} is after end date {end_date}")

        period = [e for e in self.ledger_repo.list_entries() if start_date <= e.entry_date <= end_date]
        revenue = [e for e in period if account_type_for(e.account_code) == AccountType.REVENUE]
        cogs = [e for e in period if e.account_code == AccountCode.COGS.value]
        other_expenses = [
            e
            for e in period
            if account_type_for(e.account_code) == AccountType.EXPENSE and e.account_code != AccountCode.COGS.value
        ]

        return ProfitAndLossDTO(
            start_date=start_date,
            end_date=end_date,
            revenue=_net_credit(revenue),
            cost_of_goods_sold=_net_debit(cogs),
            other_expenses=_net_debit(other_expenses),
        )

    def run_integrity_audit(self) -> IntegrityAuditDTO:
        """
        Cross-checks the stores and logs every inconsistency found:

        - ledger debits differ from credits
        - raw material below zero
        - stock status disagreeing with its quantity
        - received purchase orders with no ledger posting
        """
        logger.info("Running inventory/ledger integrity audit...")
        audit = IntegrityAuditDTO(checked_on=local_business_date())
        entries = self.ledger_repo.list_entries()

        debit_sum, credit_sum = total_debits(entries), total_credits(entries)
        if debit_sum != credit_sum:
            audit.issues.append(
                IntegrityIssueDTO("ledger_imbalance", f"Ledger debits {debit_sum} != credits {credit_sum}")
            )

        for material in self.raw_material_repo.get_all_raw_materials():
            if material.quantity_on_hand < 0:
                audit.issues.append(
                    IntegrityIssueDTO(
                        "negative_stock",
                        f"Raw material '{material.name}' has {material.quantity_on_hand} on hand",
                        material.id,
                    )
                )

        for item in self.stock_item_repo.get_all_stock_items():
            expected = normalize_stock_status(item.quantity_available, item.status)
            if expected != item.status:
                audit.issues.append(
                    IntegrityIssueDTO(
                        "status_mismatch",
                        f"Stock item {item.sku} has quantity {item.quantity_available} "
                        f"but status {item.status.value} (expected {expected.value})",
                        item.id,
                    )
                )

        posted_po_ids = {
            e.related_id for e in entries if e.related_type == RelatedType.PURCHASE_ORDER.value and e.related_id
        }
        for po in self.purchase_order_repo.get_all_purchase_orders():
            if po.status == PurchaseOrderStatus.PENDING or po.total_amount == 0:
                continue
            if po.id not in posted_po_ids:
                audit.issues.append(
                    IntegrityIssueDTO(
                        "unposted_receipt",
                        f"Purchase order {po.id} is {po.status.value} but has no ledger posting",
                        po.id,
                    )
                )

        for issue in audit.issues:
            logger.warning(f"Integrity issue [{issue.kind}]: {issue.description}")
        if audit.is_clean:
            logger.info("Integrity audit passed: ledger balanced, stock and purchase orders consistent.")
        return audit
