# jewelerp/purchasing_domain/domain/repositories/purchase_order_repository.py
"""Purchase order repository interface."""
from abc import ABC, abstractmethod
from typing import Optional

from jewelerp.purchasing_domain.domain.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderStatus,
)


class IPurchaseOrderRepository(ABC):

    @abstractmethod
    def get_purchase_order(self, purchase_order_id: int) -> Optional[PurchaseOrder]:
        """Retrieves a purchase order by id, or None when it does not exist."""
        pass

    @abstractmethod
    def get_all_purchase_orders(self) -> list[PurchaseOrder]:
        """Retrieves all purchase orders."""
        pass

    @abstractmethod
    def create_purchase_order(self, purchase_order: PurchaseOrder) -> PurchaseOrder:
        """Inserts a purchase order and returns it with its store-assigned id."""
        pass

    @abstractmethod
    def update_purchase_order_status(self, purchase_order_id: int, status: PurchaseOrderStatus) -> None:
        """Moves a purchase order to a new lifecycle status."""
        pass
