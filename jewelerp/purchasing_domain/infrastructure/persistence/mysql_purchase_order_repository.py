# jewelerp/purchasing_domain/infrastructure/persistence/mysql_purchase_order_repository.py
"""MySQL implementation of the purchase order repository."""

import logging
from dataclasses import replace
from typing import Optional

from jewelerp.common.exceptions.custom_exceptions import DatabaseError
from jewelerp.common.infrastructure.mysql_base_repository import MySQLRepositoryBase
from jewelerp.common.utils.date_utils import format_date_for_db, parse_db_date
from jewelerp.purchasing_domain.domain.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderStatus,
)
from jewelerp.purchasing_domain.domain.repositories.purchase_order_repository import (
    IPurchaseOrderRepository,
)

logger = logging.getLogger(__name__)


def purchase_order_from_row(row: dict) -> PurchaseOrder:
    return PurchaseOrder(
        id=row["id"],
        vendor_id=row["vendor_id"],
        order_date=parse_db_date(row["date"]),
        status=row["status"],
        total_amount=row.get("total_amount") or 0,
    )


class MySQLPurchaseOrderRepository(MySQLRepositoryBase, IPurchaseOrderRepository):
    """MySQL implementation of the Purchase Order Repository."""

    table_name = "purchase_orders"
    create_table_query = """
    CREATE TABLE IF NOT EXISTS purchase_orders (
        id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
        vendor_id BIGINT UNSIGNED NOT NULL,
        date DATE NOT NULL,
        status VARCHAR(16) NOT NULL,
        total_amount DECIMAL(18, 4) NOT NULL DEFAULT 0,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        INDEX idx_status (status)
    ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
    """

    def get_purchase_order(self, purchase_order_id: int) -> Optional[PurchaseOrder]:
        """Retrieves a purchase order by id."""
        row = self._fetch_one(
            "SELECT * FROM purchase_orders WHERE id = %s LIMIT 1",
            (purchase_order_id,),
            f"Error fetching purchase order {purchase_order_id}",
        )
        return purchase_order_from_row(row) if row else None

    def get_all_purchase_orders(self) -> list[PurchaseOrder]:
        """Retrieves all purchase orders."""
        rows = self._fetch_all("SELECT * FROM purchase_orders ORDER BY date DESC, id DESC", (), "Error fetching purchase orders")
        return [purchase_order_from_row(row) for row in rows]

    def create_purchase_order(self, purchase_order: PurchaseOrder) -> PurchaseOrder:
        """Inserts a purchase order and returns it with its new id."""
        insert_query = """
        INSERT INTO purchase_orders (vendor_id, date, status, total_amount)
        VALUES (%s, %s, %s, %s)
        """
        params = (
            purchase_order.vendor_id,
            format_date_for_db(purchase_order.order_date),
            purchase_order.status.value,
            purchase_order.total_amount,
        )
        new_id = self._execute_write(insert_query, params, "Error saving purchase order")
        if not new_id:
            raise DatabaseError("No id returned for new purchase order", outcome_unknown=True)
        return replace(purchase_order, id=new_id)

    def update_purchase_order_status(self, purchase_order_id: int, status: PurchaseOrderStatus) -> None:
        """Moves a purchase order to a new lifecycle status."""
        self._execute_write(
            "UPDATE purchase_orders SET status = %s WHERE id = %s",
            (PurchaseOrderStatus(status).value, purchase_order_id),
            f"Error updating status of purchase order {purchase_order_id}",
        )
        logger.debug(f"Purchase order {purchase_order_id} -> {PurchaseOrderStatus(status).value}")
