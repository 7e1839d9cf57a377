# jewelerp/inventory_domain/domain/repositories/stock_item_repository.py
"""Stock item repository interface."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from jewelerp.inventory_domain.domain.entities.stock_item import StockItem


class IStockItemRepository(ABC):

    @abstractmethod
    def get_stock_item(self, item_id: int) -> Optional[StockItem]:
        """Retrieves a stock item by id, or None when it does not exist."""
        pass

    @abstractmethod
    def get_all_stock_items(self) -> list[StockItem]:
        """Retrieves all stock items, newest first."""
        pass

    @abstractmethod
    def create_stock_item(self, item: StockItem) -> StockItem:
        """Inserts a stock item and returns it with its store-assigned id."""
        pass

    @abstractmethod
    def update_stock_item(self, item_id: int, fields: dict[str, Any]) -> None:
        """Applies a partial update (entity attribute name -> value)."""
        pass

    @abstractmethod
    def delete_stock_item(self, item_id: int) -> None:
        """Deletes a stock item."""
        pass
