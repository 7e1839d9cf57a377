"""Data Transfer Objects for the inventory/ledger transactions."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional, Union

from jewelerp.common.utils.money import to_decimal, to_money
from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot, UnitOfMeasure
from jewelerp.inventory_domain.domain.entities.stock_item import ItemType, StockItem
from jewelerp.ledger_domain.domain.entities.ledger_entry import LedgerEntry
from jewelerp.purchasing_domain.domain.entities.purchase_order import PurchaseOrder

NEW_DESTINATION = "new"


class TransactionType(str, Enum):
    SALE = "Sale"
    MANUFACTURING_JOB = "Manufacturing Job"
    PURCHASE_RECEIPT = "Purchase Receipt"


class ReceiptTarget(str, Enum):
    RAW_MATERIAL = "raw_material"
    FINISHED_GOOD = "inventory"


@dataclass
class SaleRequestDTO:
    """Sell `quantity_sold` units of a stock item at `unit_sale_price` each."""

    stock_item_id: int
    quantity_sold: int
    unit_sale_price: Decimal
    entry_date: Optional[date] = None  # defaults to today, shop-local


@dataclass
class ManufacturingJobRequestDTO:
    """Consume raw material to produce one finished piece with a known landed cost."""

    raw_material_id: int
    quantity_used: Decimal
    output_name: str
    output_sku: str
    total_output_cost: Decimal
    output_location: str = "Manufacturing Output"
    output_item_type: ItemType = ItemType.FINISHED_GOOD
    entry_date: Optional[date] = None

    @classmethod
    def from_labor_cost(
        cls,
        raw_material: RawMaterialLot,
        quantity_used: Decimal,
        labor_cost: Decimal,
        output_name: str,
        output_sku: str,
        **kwargs,
    ) -> "ManufacturingJobRequestDTO":
        """Builds a job the way the production form does: materials at current cost plus labor."""
        material_cost = to_money(to_decimal(quantity_used) * raw_material.unit_cost)
        return cls(
            raw_material_id=raw_material.id,
            quantity_used=to_decimal(quantity_used),
            output_name=output_name or "Custom Job",
            output_sku=output_sku,
            total_output_cost=to_money(material_cost + to_decimal(labor_cost)),
            **kwargs,
        )


@dataclass
class NewItemDTO:
    """Fields for a stock record created by a purchase receipt."""

    name: str
    sku: Optional[str] = None  # finished goods only
    item_type: ItemType = ItemType.FINISHED_GOOD
    location: str = "Receiving"
    unit_of_measure: UnitOfMeasure = UnitOfMeasure.GRAM  # raw materials only
    reorder_threshold: Optional[int] = None


@dataclass
class PurchaseReceiptRequestDTO:
    """Receive a pending purchase order into a new or existing stock record."""

    purchase_order_id: int
    target: ReceiptTarget
    destination_item_id: Union[int, Literal["new"]]
    quantity_received: Decimal
    new_item: Optional[NewItemDTO] = None
    entry_date: Optional[date] = None

    @property
    def creates_new_record(self) -> bool:
        return self.destination_item_id == NEW_DESTINATION


@dataclass
class TransactionResultDTO:
    """Authoritative state re-read from the stores after a committed transaction."""

    transaction_type: TransactionType
    entry_date: date
    ledger_entries: list[LedgerEntry] = field(default_factory=list)
    stock_item: Optional[StockItem] = None
    raw_material: Optional[RawMaterialLot] = None
    purchase_order: Optional[PurchaseOrder] = None

    @property
    def total_debit(self) -> Decimal:
        return sum((e.debit for e in self.ledger_entries), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((e.credit for e in self.ledger_entries), Decimal("0"))
