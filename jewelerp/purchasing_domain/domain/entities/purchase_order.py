"""Purchase order entity."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from jewelerp.common.utils.money import to_money


class PurchaseOrderStatus(str, Enum):
    PENDING = "Pending"
    RECEIVED = "Received"
    PAID = "Paid"


@dataclass
class PurchaseOrder:
    """A commitment to a vendor; lifecycle Pending -> Received -> Paid."""

    vendor_id: int
    order_date: date
    total_amount: Decimal = Decimal("0")
    status: PurchaseOrderStatus = PurchaseOrderStatus.PENDING
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.status = PurchaseOrderStatus(self.status)
        self.total_amount = to_money(self.total_amount)
        if self.total_amount < 0:
            raise ValueError("Purchase order total cannot be negative.")

    @property
    def is_open(self) -> bool:
        return self.status == PurchaseOrderStatus.PENDING
