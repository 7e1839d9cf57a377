# jewelerp/purchasing_domain/infrastructure/persistence/in_memory_purchase_order_repository.py
"""Process-local purchase orders for tests and the `memory` storage backend."""

from dataclasses import replace
from typing import Optional

from jewelerp.common.exceptions.custom_exceptions import NotFoundError
from jewelerp.purchasing_domain.domain.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderStatus,
)
from jewelerp.purchasing_domain.domain.repositories.purchase_order_repository import (
    IPurchaseOrderRepository,
)


class InMemoryPurchaseOrderRepository(IPurchaseOrderRepository):

    def __init__(self, purchase_orders: Optional[list[PurchaseOrder]] = None) -> None:
        self._orders: dict[int, PurchaseOrder] = {}
        for purchase_order in purchase_orders or []:
            self.create_purchase_order(purchase_order)

    def get_purchase_order(self, purchase_order_id: int) -> Optional[PurchaseOrder]:
        order = self._orders.get(purchase_order_id)
        return replace(order) if order else None

    def get_all_purchase_orders(self) -> list[PurchaseOrder]:
        return [replace(o) for o in sorted(self._orders.values(), key=lambda o: (o.order_date, o.id), reverse=True)]

    def create_purchase_order(self, purchase_order: PurchaseOrder) -> PurchaseOrder:
        new_id = purchase_order.id if purchase_order.id is not None else max(self._orders, default=0) + 1
        stored = replace(purchase_order, id=new_id)
        self._orders[new_id] = stored
        return replace(stored)

    def update_purchase_order_status(self, purchase_order_id: int, status: PurchaseOrderStatus) -> None:
        if purchase_order_id not in self._orders:
            raise NotFoundError("Purchase order", purchase_order_id)
        self._orders[purchase_order_id] = replace(self._orders[purchase_order_id], status=PurchaseOrderStatus(status))
