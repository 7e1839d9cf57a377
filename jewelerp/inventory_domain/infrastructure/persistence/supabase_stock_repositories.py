# jewelerp/inventory_domain/infrastructure/persistence/supabase_stock_repositories.py
"""Stock stores backed by the storefront's Supabase tables."""

from typing import Any, Optional

from jewelerp.common.exceptions.custom_exceptions import APIError
from jewelerp.common.infrastructure.supabase_rest_client import SupabaseRestClient
from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot
from jewelerp.inventory_domain.domain.entities.stock_item import StockItem
from jewelerp.inventory_domain.domain.repositories.raw_material_repository import (
    IRawMaterialRepository,
)
from jewelerp.inventory_domain.domain.repositories.stock_item_repository import (
    IStockItemRepository,
)
from jewelerp.inventory_domain.infrastructure.persistence.mysql_raw_material_repository import (
    RAW_MATERIAL_COLUMNS,
    raw_material_from_row,
)
from jewelerp.inventory_domain.infrastructure.persistence.mysql_stock_item_repository import (
    STOCK_ITEM_COLUMNS,
    stock_item_from_row,
)


def _to_columns(column_map: dict[str, str], fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(column_map)
    if unknown:
        raise APIError(f"Unknown fields: {', '.join(sorted(unknown))}")
    return {column_map[name]: value for name, value in fields.items()}


class SupabaseStockItemRepository(IStockItemRepository):
    table = "inventory_items"

    def __init__(self, client: Optional[SupabaseRestClient] = None) -> None:
        self.client = client or SupabaseRestClient()

    def get_stock_item(self, item_id: int) -> Optional[StockItem]:
        rows = self.client.select(self.table, {"id": item_id})
        return stock_item_from_row(rows[0]) if rows else None

    def get_all_stock_items(self) -> list[StockItem]:
        return [stock_item_from_row(row) for row in self.client.select(self.table, order="id.desc")]

    def create_stock_item(self, item: StockItem) -> StockItem:
        values = {name: getattr(item, name) for name in STOCK_ITEM_COLUMNS}
        rows = self.client.insert(self.table, [_to_columns(STOCK_ITEM_COLUMNS, values)])
        if not rows:
            raise APIError(f"No row returned for new stock item {item.sku}", outcome_unknown=True)
        return stock_item_from_row(rows[0])

    def update_stock_item(self, item_id: int, fields: dict[str, Any]) -> None:
        if fields:
            self.client.update(self.table, item_id, _to_columns(STOCK_ITEM_COLUMNS, fields))

    def delete_stock_item(self, item_id: int) -> None:
        self.client.delete(self.table, item_id)


class SupabaseRawMaterialRepository(IRawMaterialRepository):
    table = "raw_materials"

    def __init__(self, client: Optional[SupabaseRestClient] = None) -> None:
        self.client = client or SupabaseRestClient()

    def get_raw_material(self, material_id: int) -> Optional[RawMaterialLot]:
        rows = self.client.select(self.table, {"id": material_id})
        return raw_material_from_row(rows[0]) if rows else None

    def get_all_raw_materials(self) -> list[RawMaterialLot]:
        return [raw_material_from_row(row) for row in self.client.select(self.table, order="name.asc")]

    def create_raw_material(self, material: RawMaterialLot) -> RawMaterialLot:
        values = {name: getattr(material, name) for name in RAW_MATERIAL_COLUMNS}
        rows = self.client.insert(self.table, [_to_columns(RAW_MATERIAL_COLUMNS, values)])
        if not rows:
            raise APIError(f"No row returned for new raw material {material.name}", outcome_unknown=True)
        return raw_material_from_row(rows[0])

    def update_raw_material(self, material_id: int, fields: dict[str, Any]) -> None:
        if fields:
            self.client.update(self.table, material_id, _to_columns(RAW_MATERIAL_COLUMNS, fields))

    def delete_raw_material(self, material_id: int) -> None:
        self.client.delete(self.table, material_id)
