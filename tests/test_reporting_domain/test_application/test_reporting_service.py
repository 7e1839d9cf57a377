# tests/test_reporting_domain/test_application/test_reporting_service.py
"""Tests for the Reporting Application Service."""

from datetime import date
from decimal import Decimal

import pytest

from jewelerp.common.dtos.transaction_dtos import (
    NEW_DESTINATION,
    NewItemDTO,
    PurchaseReceiptRequestDTO,
    ReceiptTarget,
    SaleRequestDTO,
)
from jewelerp.common.exceptions.custom_exceptions import ValidationError
from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot
from jewelerp.inventory_domain.domain.entities.stock_item import ItemStatus, StockItem
from jewelerp.ledger_domain.domain.entities.ledger_entry import AccountType, LedgerEntry
from jewelerp.purchasing_domain.domain.entities.purchase_order import PurchaseOrder, PurchaseOrderStatus


@pytest.fixture
def posted_business_day(transaction_service) -> None:
    """One sale on 17 May and one purchase receipt on 20 May."""
    transaction_service.record_sale(
        SaleRequestDTO(stock_item_id=1, quantity_sold=2, unit_sale_price=Decimal("250"), entry_date=date(2024, 5, 17))
    )
    transaction_service.receive_purchase_order(
        PurchaseReceiptRequestDTO(
            purchase_order_id=1,
            target=ReceiptTarget.RAW_MATERIAL,
            destination_item_id=NEW_DESTINATION,
            quantity_received=10,
            new_item=NewItemDTO(name="Ruby Rough"),
            entry_date=date(2024, 5, 20),
        )
    )


def test_dashboard_metrics(reporting_service, posted_business_day) -> None:
    metrics = reporting_service.get_dashboard_metrics()

    assert metrics.finished_goods_value == Decimal("300.00")  # 3 rings at 100
    assert metrics.raw_material_value == Decimal("5000.00")  # 50 g at 80 + 10 at 100
    assert metrics.open_purchase_order_value == Decimal("0")
    assert metrics.low_stock_count == 0
    assert metrics.total_revenue == Decimal("500.00")
    assert metrics.total_cogs == Decimal("200.00")
    assert metrics.gross_profit == Decimal("300.00")


def test_dashboard_counts_open_purchase_orders_and_low_stock(reporting_service, stock_item_repo) -> None:
    stock_item_repo.create_stock_item(StockItem(sku="PIN-1", name="Pin", quantity_available=1, reorder_threshold=3))

    metrics = reporting_service.get_dashboard_metrics()

    assert metrics.open_purchase_order_value == Decimal("1000.00")
    assert metrics.low_stock_count == 1
    assert [item.sku for item in reporting_service.get_low_stock_items()] == ["PIN-1"]


def test_trial_balance(reporting_service, posted_business_day) -> None:
    trial_balance = reporting_service.get_trial_balance()

    assert [line.account_code for line in trial_balance.lines] == ["1001", "1200", "2000", "4001", "5001"]
    inventory = trial_balance.lines[1]
    assert inventory.account_name == "Finished Goods Inventory"
    assert inventory.account_type == AccountType.ASSET
    assert inventory.total_debit == Decimal("1000.00")
    assert inventory.total_credit == Decimal("200.00")
    assert inventory.balance == Decimal("800.00")
    assert trial_balance.total_debit == trial_balance.total_credit == Decimal("1700.00")
    assert trial_balance.is_balanced is True


def test_trial_balance_as_of_excludes_later_entries(reporting_service, posted_business_day) -> None:
    trial_balance = reporting_service.get_trial_balance(as_of=date(2024, 5, 18))

    assert [line.account_code for line in trial_balance.lines] == ["1001", "1200", "4001", "5001"]
    assert trial_balance.total_debit == Decimal("700.00")


def test_profit_and_loss_includes_other_expense_accounts(reporting_service, ledger_repo, posted_business_day) -> None:
    ledger_repo.append_many(
        [
            LedgerEntry(date(2024, 5, 31), "6001", "May rent", debit=Decimal("120")),
            LedgerEntry(date(2024, 5, 31), "1001", "May rent", credit=Decimal("120")),
        ]
    )

    report = reporting_service.get_profit_and_loss(date(2024, 5, 1), date(2024, 5, 31))

    assert report.revenue == Decimal("500.00")
    assert report.cost_of_goods_sold == Decimal("200.00")
    assert report.other_expenses == Decimal("120.00")
    assert report.gross_profit == Decimal("300.00")
    assert report.net_income == Decimal("180.00")


def test_profit_and_loss_rejects_inverted_period(reporting_service) -> None:
    with pytest.raises(ValidationError):
        reporting_service.get_profit_and_loss(date(2024, 6, 1), date(2024, 5, 1))


def test_integrity_audit_transactions_leave_no_issues(reporting_service, posted_business_day) -> None:
    """Only the sample PO #2, received without a posting, is flagged."""
    audit = reporting_service.run_integrity_audit()

    assert [(issue.kind, issue.related_id) for issue in audit.issues] == [("unposted_receipt", 2)]


def test_integrity_audit_clean(reporting_service, purchase_order_repo) -> None:
    purchase_order_repo.update_purchase_order_status(2, PurchaseOrderStatus.PENDING)

    assert reporting_service.run_integrity_audit().is_clean


def test_integrity_audit_reports_inconsistencies(
    reporting_service, stock_item_repo, raw_material_repo, ledger_repo, purchase_order_repo
) -> None:
    """The sample received PO #2 has no posting; further issues are seeded."""
    stock_item_repo.create_stock_item(
        StockItem(sku="GHOST", name="Ghost", quantity_available=0, status=ItemStatus.IN_STOCK)
    )
    raw_material_repo.create_raw_material(RawMaterialLot(name="Platinum", quantity_on_hand=Decimal("-2")))
    ledger_repo.append_many([LedgerEntry(date(2024, 5, 1), "1001", "Stray", debit=Decimal("1"))])
    purchase_order_repo.create_purchase_order(
        PurchaseOrder(vendor_id=3, order_date=date(2024, 5, 2), total_amount=0, status=PurchaseOrderStatus.RECEIVED)
    )

    audit = reporting_service.run_integrity_audit()

    assert sorted(issue.kind for issue in audit.issues) == [
        "ledger_imbalance",
        "negative_stock",
        "status_mismatch",
        "unposted_receipt",
    ]
    unposted = next(issue for issue in audit.issues if issue.kind == "unposted_receipt")
    assert unposted.related_id == 2
