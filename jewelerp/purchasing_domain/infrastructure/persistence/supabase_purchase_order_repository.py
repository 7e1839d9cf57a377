# jewelerp/purchasing_domain/infrastructure/persistence/supabase_purchase_order_repository.py
"""Purchase orders backed by the storefront's Supabase table."""

from typing import Optional

from jewelerp.common.exceptions.custom_exceptions import APIError
from jewelerp.common.infrastructure.supabase_rest_client import SupabaseRestClient
from jewelerp.purchasing_domain.domain.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderStatus,
)
from jewelerp.purchasing_domain.domain.repositories.purchase_order_repository import (
    IPurchaseOrderRepository,
)
from jewelerp.purchasing_domain.infrastructure.persistence.mysql_purchase_order_repository import (
    purchase_order_from_row,
)


class SupabasePurchaseOrderRepository(IPurchaseOrderRepository):
    table = "purchase_orders"

    def __init__(self, client: Optional[SupabaseRestClient] = None) -> None:
        self.client = client or SupabaseRestClient()

    def get_purchase_order(self, purchase_order_id: int) -> Optional[PurchaseOrder]:
        rows = self.client.select(self.table, {"id": purchase_order_id})
        return purchase_order_from_row(rows[0]) if rows else None

    def get_all_purchase_orders(self) -> list[PurchaseOrder]:
        return [purchase_order_from_row(row) for row in self.client.select(self.table, order="date.desc")]

    def create_purchase_order(self, purchase_order: PurchaseOrder) -> PurchaseOrder:
        row = {
            "vendor_id": purchase_order.vendor_id,
            "date": purchase_order.order_date,
            "status": purchase_order.status,
            "total_amount": purchase_order.total_amount,
        }
        stored = self.client.insert(self.table, [row])
        if not stored:
            raise APIError("No row returned for new purchase order", outcome_unknown=True)
        return purchase_order_from_row(stored[0])

    def update_purchase_order_status(self, purchase_order_id: int, status: PurchaseOrderStatus) -> None:
        self.client.update(self.table, purchase_order_id, {"status": PurchaseOrderStatus(status)})
