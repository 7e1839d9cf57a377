# jewelerp/inventory_domain/infrastructure/persistence/mysql_stock_item_repository.py
"""MySQL implementation of the stock item repository."""

import logging
from dataclasses import replace
from typing import Any, Optional

from jewelerp.common.exceptions.custom_exceptions import DatabaseError
from jewelerp.common.infrastructure.mysql_base_repository import MySQLRepositoryBase
from jewelerp.inventory_domain.domain.entities.stock_item import StockItem
from jewelerp.inventory_domain.domain.repositories.stock_item_repository import (
    IStockItemRepository,
)

logger = logging.getLogger(__name__)

# Entity attribute -> column (column names follow the storefront schema)
STOCK_ITEM_COLUMNS: dict[str, str] = {
    "sku": "sku",
    "name": "name",
    "item_type": "item_type",
    "status": "status",
    "location": "location",
    "quantity_available": "qty_available",
    "unit_cost": "landed_cost",
    "unit_price": "retail_price",
    "reorder_threshold": "reorder_point",
    "certificate_url": "certificate_url",
}


def stock_item_from_row(row: dict) -> StockItem:
    return StockItem(
        id=row["id"],
        sku=row["sku"],
        name=row["name"],
        item_type=row["item_type"],
        status=row["status"],
        location=row.get("location") or "Unassigned",
        quantity_available=row.get("qty_available") or 0,
        unit_cost=row.get("landed_cost") or 0,
        unit_price=row.get("retail_price") or 0,
        reorder_threshold=row.get("reorder_point") or 0,
        certificate_url=row.get("certificate_url"),
    )


class MySQLStockItemRepository(MySQLRepositoryBase, IStockItemRepository):
    """MySQL implementation of the Stock Item Repository."""

    table_name = "inventory_items"
    create_table_query = """
    CREATE TABLE IF NOT EXISTS inventory_items (
        id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
        sku VARCHAR(64) NOT NULL,
        name VARCHAR(255) NOT NULL,
        item_type VARCHAR(32) NOT NULL,
        status VARCHAR(32) NOT NULL,
        location VARCHAR(255),
        qty_available INT NOT NULL DEFAULT 0,
        landed_cost DECIMAL(18, 4) NOT NULL DEFAULT 0,
        retail_price DECIMAL(18, 4) NOT NULL DEFAULT 0,
        reorder_point INT NOT NULL DEFAULT 0,
        certificate_url VARCHAR(1024),
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        INDEX idx_sku (sku)
    ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
    """

    def get_stock_item(self, item_id: int) -> Optional[StockItem]:
        """Retrieves a stock item by id."""
        row = self._fetch_one(
            "SELECT * FROM inventory_items WHERE id = %s LIMIT 1",
            (item_id,),
            f"Error fetching stock item {item_id}",
        )
        return stock_item_from_row(row) if row else None

    def get_all_stock_items(self) -> list[StockItem]:
        """Retrieves all stock items, newest first."""
        rows = self._fetch_all("SELECT * FROM inventory_items ORDER BY id DESC", (), "Error fetching stock items")
        return [stock_item_from_row(row) for row in rows]

    def create_stock_item(self, item: StockItem) -> StockItem:
        """Inserts a stock item and returns it with its new id."""
        insert_query = """
        INSERT INTO inventory_items
        (sku, name, item_type, status, location, qty_available, landed_cost, retail_price, reorder_point, certificate_url)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        params = (
            item.sku,
            item.name,
            item.item_type.value,
            item.status.value,
            item.location,
            item.quantity_available,
            item.unit_cost,
            item.unit_price,
            item.reorder_threshold,
            item.certificate_url,
        )
        new_id = self._execute_write(insert_query, params, f"Error saving stock item {item.sku}")
        if not new_id:
            raise DatabaseError(f"No id returned for new stock item {item.sku}", outcome_unknown=True)
        logger.debug(f"Created stock item {new_id} ({item.sku})")
        return replace(item, id=new_id)

    def update_stock_item(self, item_id: int, fields: dict[str, Any]) -> None:
        """Applies a partial update to a stock item."""
        if not fields:
            return
        query, values = self._build_update("inventory_items", STOCK_ITEM_COLUMNS, fields)
        self._execute_write(query, (*values, item_id), f"Error updating stock item {item_id}")

    def delete_stock_item(self, item_id: int) -> None:
        """Deletes a stock item."""
        self._execute_write("DELETE FROM inventory_items WHERE id = %s", (item_id,), f"Error deleting stock item {item_id}")
