"""Finished-goods stock item entity."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from jewelerp.common.utils.money import to_money


class ItemType(str, Enum):
    FINISHED_GOOD = "Finished Good"
    LOOSE_STONE = "Loose Stone"
    RAW_MATERIAL = "Raw Material"


class ItemStatus(str, Enum):
    IN_STOCK = "In Stock"
    IN_SERVICE = "In Service"
    SOLD = "Sold"
    RESERVED = "Reserved"


@dataclass
class StockItem:
    """A finished piece or loose stone held for sale."""

    sku: str
    name: str
    quantity_available: int = 0
    unit_cost: Decimal = Decimal("0")  # landed cost
    unit_price: Decimal = Decimal("0")  # retail price
    reorder_threshold: int = 0
    item_type: ItemType = ItemType.FINISHED_GOOD
    status: ItemStatus = ItemStatus.IN_STOCK
    location: str = "Unassigned"
    certificate_url: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        """Post-initialization for validation."""
        self.item_type = ItemType(self.item_type)
        self.status = ItemStatus(self.status)
        self.quantity_available = int(self.quantity_available)
        self.reorder_threshold = int(self.reorder_threshold)
        self.unit_cost = to_money(self.unit_cost)
        self.unit_price = to_money(self.unit_price)
        if self.quantity_available < 0:
            raise ValueError("Quantity cannot be negative.")

    @property
    def is_low_stock(self) -> bool:
        return self.quantity_available <= self.reorder_threshold

    @property
    def total_value(self) -> Decimal:
        return to_money(self.quantity_available * self.unit_cost)
