# jewelerp/inventory_domain/infrastructure/persistence/in_memory_stock_repositories.py
"""Process-local stock stores for tests and the `memory` storage backend."""

from dataclasses import fields as dataclass_fields
from dataclasses import replace
from typing import Any, Optional

from jewelerp.common.exceptions.custom_exceptions import DatabaseError, NotFoundError
from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot
from jewelerp.inventory_domain.domain.entities.stock_item import StockItem
from jewelerp.inventory_domain.domain.repositories.raw_material_repository import (
    IRawMaterialRepository,
)
from jewelerp.inventory_domain.domain.repositories.stock_item_repository import (
    IStockItemRepository,
)


def _check_fields(entity_cls: type, fields: dict[str, Any]) -> None:
    known = {f.name for f in dataclass_fields(entity_cls)} - {"id"}
    unknown = set(fields) - known
    if unknown:
        raise DatabaseError(f"Unknown fields for {entity_cls.__name__}: {', '.join(sorted(unknown))}")


class InMemoryStockItemRepository(IStockItemRepository):
    """Dictionary-backed stock items. Callers only ever receive copies."""

    def __init__(self, items: Optional[list[StockItem]] = None) -> None:
        self._items: dict[int, StockItem] = {}
        for item in items or []:
            self.create_stock_item(item)

    def get_stock_item(self, item_id: int) -> Optional[StockItem]:
        item = self._items.get(item_id)
        return replace(item) if item else None

    def get_all_stock_items(self) -> list[StockItem]:
        return [replace(item) for _, item in sorted(self._items.items(), reverse=True)]

    def create_stock_item(self, item: StockItem) -> StockItem:
        new_id = item.id if item.id is not None else max(self._items, default=0) + 1
        stored = replace(item, id=new_id)
        self._items[new_id] = stored
        return replace(stored)

    def update_stock_item(self, item_id: int, fields: dict[str, Any]) -> None:
        if item_id not in self._items:
            raise NotFoundError("Stock item", item_id)
        _check_fields(StockItem, fields)
        self._items[item_id] = replace(self._items[item_id], **fields)

    def delete_stock_item(self, item_id: int) -> None:
        if self._items.pop(item_id, None) is None:
            raise NotFoundError("Stock item", item_id)


class InMemoryRawMaterialRepository(IRawMaterialRepository):
    """Dictionary-backed raw material lots. Callers only ever receive copies."""

    def __init__(self, materials: Optional[list[RawMaterialLot]] = None) -> None:
        self._materials: dict[int, RawMaterialLot] = {}
        for material in materials or []:
            self.create_raw_material(material)

    def get_raw_material(self, material_id: int) -> Optional[RawMaterialLot]:
        material = self._materials.get(material_id)
        return replace(material) if material else None

    def get_all_raw_materials(self) -> list[RawMaterialLot]:
        return [replace(m) for m in sorted(self._materials.values(), key=lambda m: m.name)]

    def create_raw_material(self, material: RawMaterialLot) -> RawMaterialLot:
        new_id = material.id if material.id is not None else max(self._materials, default=0) + 1
        stored = replace(material, id=new_id)
        self._materials[new_id] = stored
        return replace(stored)

    def update_raw_material(self, material_id: int, fields: dict[str, Any]) -> None:
        if material_id not in self._materials:
            raise NotFoundError("Raw material", material_id)
        _check_fields(RawMaterialLot, fields)
        self._materials[material_id] = replace(self._materials[material_id], **fields)

    def delete_raw_material(self, material_id: int) -> None:
        if self._materials.pop(material_id, None) is None:
            raise NotFoundError("Raw material", material_id)
