# jewelerp/inventory_domain/infrastructure/persistence/mysql_raw_material_repository.py
"""MySQL implementation of the raw material repository."""

import logging
from dataclasses import replace
from typing import Any, Optional

from jewelerp.common.exceptions.custom_exceptions import DatabaseError
from jewelerp.common.infrastructure.mysql_base_repository import MySQLRepositoryBase
from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot
from jewelerp.inventory_domain.domain.repositories.raw_material_repository import (
    IRawMaterialRepository,
)

logger = logging.getLogger(__name__)

RAW_MATERIAL_COLUMNS: dict[str, str] = {
    "name": "name",
    "unit_of_measure": "unit_of_measure",
    "quantity_on_hand": "current_stock",
    "unit_cost": "cost_per_unit",
}


def raw_material_from_row(row: dict) -> RawMaterialLot:
    return RawMaterialLot(
        id=row["id"],
        name=row["name"],
        unit_of_measure=row["unit_of_measure"],
        quantity_on_hand=row.get("current_stock") or 0,
        unit_cost=row.get("cost_per_unit") or 0,
    )


class MySQLRawMaterialRepository(MySQLRepositoryBase, IRawMaterialRepository):
    """MySQL implementation of the Raw Material Repository."""

    table_name = "raw_materials"
    create_table_query = """
    CREATE TABLE IF NOT EXISTS raw_materials (
        id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
        name VARCHAR(255) NOT NULL,
        unit_of_measure VARCHAR(16) NOT NULL,
        current_stock DECIMAL(18, 4) NOT NULL DEFAULT 0,
        cost_per_unit DECIMAL(18, 4) NOT NULL DEFAULT 0,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
    """

    def get_raw_material(self, material_id: int) -> Optional[RawMaterialLot]:
        """Retrieves a raw material lot by id."""
        row = self._fetch_one(
            "SELECT * FROM raw_materials WHERE id = %s LIMIT 1",
            (material_id,),
            f"Error fetching raw material {material_id}",
        )
        return raw_material_from_row(row) if row else None

    def get_all_raw_materials(self) -> list[RawMaterialLot]:
        """Retrieves all raw material lots."""
        rows = self._fetch_all("SELECT * FROM raw_materials ORDER BY name", (), "Error fetching raw materials")
        return [raw_material_from_row(row) for row in rows]

    def create_raw_material(self, material: RawMaterialLot) -> RawMaterialLot:
        """Inserts a raw material lot and returns it with its new id."""
        insert_query = """
        INSERT INTO raw_materials (name, unit_of_measure, current_stock, cost_per_unit)
        VALUES (%s, %s, %s, %s)
        """
        params = (material.name, material.unit_of_measure.value, material.quantity_on_hand, material.unit_cost)
        new_id = self._execute_write(insert_query, params, f"Error saving raw material {material.name}")
        if not new_id:
            raise DatabaseError(f"No id returned for new raw material {material.name}", outcome_unknown=True)
        logger.debug(f"Created raw material {new_id} ({material.name})")
        return replace(material, id=new_id)

    def update_raw_material(self, material_id: int, fields: dict[str, Any]) -> None:
        """Applies a partial update to a raw material lot."""
        if not fields:
            return
        query, values = self._build_update("raw_materials", RAW_MATERIAL_COLUMNS, fields)
        self._execute_write(query, (*values, material_id), f"Error updating raw material {material_id}")

    def delete_raw_material(self, material_id: int) -> None:
        """Deletes a raw material lot."""
        self._execute_write(
            "DELETE FROM raw_materials WHERE id = %s", (material_id,), f"Error deleting raw material {material_id}"
        )
