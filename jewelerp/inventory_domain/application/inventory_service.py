# jewelerp/inventory_domain/application/inventory_service.py
"""Application service for maintaining stock items and raw material lots."""

import logging
from dataclasses import fields as dataclass_fields
from dataclasses import replace
from typing import Any

from jewelerp.common.exceptions.custom_exceptions import NotFoundError, ValidationError
from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot
from jewelerp.inventory_domain.domain.entities.stock_item import StockItem
from jewelerp.inventory_domain.domain.repositories.raw_material_repository import IRawMaterialRepository
from jewelerp.inventory_domain.domain.repositories.stock_item_repository import IStockItemRepository
from jewelerp.inventory_domain.domain.services.stock_status_service import (
    normalize_stock_fields,
    normalize_stock_item,
)

logger = logging.getLogger(__name__)

EDITABLE_STOCK_FIELDS = frozenset(f.name for f in dataclass_fields(StockItem)) - {"id"}


class InventoryApplicationService:
    """Stock item and raw material maintenance outside of the ledger transactions."""

    def __init__(self, stock_item_repo: IStockItemRepository, raw_material_repo: IRawMaterialRepository) -> None:
        """Initializes the InventoryApplicationService."""
        self.stock_item_repo = stock_item_repo
        self.raw_material_repo = raw_material_repo

    def list_items(self) -> list[StockItem]:
        return self.stock_item_repo.get_all_stock_items()

    def get_item(self, item_id: int) -> StockItem:
        item = self.stock_item_repo.get_stock_item(item_id)
        if item is None:
            raise NotFoundError("Stock item", item_id)
        return item

    def add_item(self, item: StockItem) -> StockItem:
        """Creates a stock item; its status is normalized against its quantity first."""
        if not item.name or not item.sku:
            raise ValidationError("Stock items need a name and a SKU")
        if item.quantity_available < 0:
            raise ValidationError("Quantity cannot be negative")

        created = self.stock_item_repo.create_stock_item(normalize_stock_item(item))
        logger.info(f"Added stock item {created.sku} (id {created.id}): {created.quantity_available} {created.status.value}")
        return created

    def update_item(self, item_id: int, fields: dict[str, Any]) -> StockItem:
        """
        Applies a partial update and returns the stored item.

        Quantity and status always travel together: zeroing the quantity marks the
        item Sold and restocking a Sold item puts it back In Stock.
        """
        unknown = set(fields) - EDITABLE_STOCK_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update stock item fields: {', '.join(sorted(unknown))}")

        current = self.get_item(item_id)
        try:
            normalized = normalize_stock_fields(current, fields)
            # Coerces the values the same way the entity does
            candidate = replace(current, **normalized)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid stock item update: {str(e).rstrip('.')}")

        changes = {name: getattr(candidate, name) for name in normalized}
        self.stock_item_repo.update_stock_item(item_id, changes)
        logger.info(f"Updated stock item {item_id}: {', '.join(sorted(changes))}")
        return self.get_item(item_id)

    def delete_item(self, item_id: int) -> None:
        item = self.get_item(item_id)
        self.stock_item_repo.delete_stock_item(item_id)
        logger.info(f"Deleted stock item {item.sku} (id {item_id})")

    def list_raw_materials(self) -> list[RawMaterialLot]:
        return self.raw_material_repo.get_all_raw_materials()

    def add_raw_material(self, material: RawMaterialLot) -> RawMaterialLot:
        if not material.name:
            raise ValidationError("Raw materials need a name")
        if material.quantity_on_hand < 0:
            raise ValidationError("Quantity on hand cannot be negative")
        if material.unit_cost < 0:
            raise ValidationError("Unit cost cannot be negative")

        created = self.raw_material_repo.create_raw_material(material)
        logger.info(
            f"Added raw material {created.name} (id {created.id}): "
            f"{created.quantity_on_hand} {created.unit_of_measure.value} @ {created.unit_cost}"
        )
        return created
