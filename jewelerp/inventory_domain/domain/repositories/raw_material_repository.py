# jewelerp/inventory_domain/domain/repositories/raw_material_repository.py
"""Raw material repository interface."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot


class IRawMaterialRepository(ABC):

    @abstractmethod
    def get_raw_material(self, material_id: int) -> Optional[RawMaterialLot]:
        """Retrieves a raw material lot by id, or None when it does not exist."""
        pass

    @abstractmethod
    def get_all_raw_materials(self) -> list[RawMaterialLot]:
        """Retrieves all raw material lots."""
        pass

    @abstractmethod
    def create_raw_material(self, material: RawMaterialLot) -> RawMaterialLot:
        """Inserts a raw material lot and returns it with its store-assigned id."""
        pass

    @abstractmethod
    def update_raw_material(self, material_id: int, fields: dict[str, Any]) -> None:
        """Applies a partial update (entity attribute name -> value)."""
        pass

    @abstractmethod
    def delete_raw_material(self, material_id: int) -> None:
        """Deletes a raw material lot."""
        pass
