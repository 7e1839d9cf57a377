"""Raw material lot entity."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from jewelerp.common.utils.money import to_money, to_quantity


class UnitOfMeasure(str, Enum):
    GRAM = "Gram"
    CARAT = "Carat"
    PIECE = "Piece"


@dataclass
class RawMaterialLot:
    """Bulk material (gold, stones, findings) carried at weighted-average cost."""

    name: str
    unit_of_measure: UnitOfMeasure = UnitOfMeasure.GRAM
    quantity_on_hand: Decimal = Decimal("0")
    unit_cost: Decimal = Decimal("0")
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.unit_of_measure = UnitOfMeasure(self.unit_of_measure)
        self.quantity_on_hand = to_quantity(self.quantity_on_hand)
        self.unit_cost = to_money(self.unit_cost)

    @property
    def total_value(self) -> Decimal:
        return to_money(self.quantity_on_hand * self.unit_cost)
