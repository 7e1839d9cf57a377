# tests/test_purchasing_domain/test_infrastructure/test_in_memory_purchase_order_repository.py

from datetime import date
from decimal import Decimal

from jewelerp.purchasing_domain.domain.entities.purchase_order import PurchaseOrder, PurchaseOrderStatus
from jewelerp.purchasing_domain.infrastructure.persistence.in_memory_purchase_order_repository import (
    InMemoryPurchaseOrderRepository,
)


def test_in_memory_purchase_order_repository_returns_copies() -> None:
    repo = InMemoryPurchaseOrderRepository([PurchaseOrder(vendor_id=1, order_date=date(2024, 5, 1), total_amount=10)])

    fetched = repo.get_purchase_order(1)
    fetched.status = PurchaseOrderStatus.PAID

    assert repo.get_purchase_order(1).status == PurchaseOrderStatus.PENDING


def test_in_memory_purchase_order_repository_update_status(sample_purchase_orders) -> None:
    repo = InMemoryPurchaseOrderRepository(sample_purchase_orders)

    repo.update_purchase_order_status(1, PurchaseOrderStatus.RECEIVED)

    assert repo.get_purchase_order(1).status == PurchaseOrderStatus.RECEIVED
    assert repo.get_purchase_order(1).total_amount == Decimal("1000.00")
