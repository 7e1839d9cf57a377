# jewelerp/inventory_domain/domain/services/stock_status_service.py
"""The single place where a stock item's status is derived from its quantity."""

from dataclasses import replace
from typing import Any

from jewelerp.inventory_domain.domain.entities.stock_item import ItemStatus, StockItem


def normalize_stock_status(quantity_available: int, current_status: ItemStatus | str) -> ItemStatus:
    """
    Applies the quantity/status coupling:

    - nothing left            -> Sold
    - stock back on a Sold row -> In Stock
    - anything else keeps its status (In Service, Reserved, In Stock)
    """
    status = ItemStatus(current_status)
    if quantity_available <= 0:
        return ItemStatus.SOLD
    if status == ItemStatus.SOLD:
        return ItemStatus.IN_STOCK
    return status


def normalize_stock_item(item: StockItem) -> StockItem:
    """Returns a copy of the item with its status normalized."""
    return replace(item, status=normalize_stock_status(item.quantity_available, item.status))


def normalize_stock_fields(current: StockItem, fields: dict[str, Any]) -> dict[str, Any]:
    """
    Completes a partial update so quantity and status always move together.

    Used on every stock mutation; the returned dict is what gets persisted.
    """
    normalized = dict(fields)
    quantity = int(normalized.get("quantity_available", current.quantity_available))
    if quantity < 0:
        raise ValueError("Quantity cannot be negative.")
    status = normalized.get("status", current.status)
    normalized["status"] = normalize_stock_status(quantity, status)
    if "quantity_available" in normalized:
        normalized["quantity_available"] = quantity
    return normalized
