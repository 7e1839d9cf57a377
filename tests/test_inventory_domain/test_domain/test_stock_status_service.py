# tests/test_inventory_domain/test_domain/test_stock_status_service.py

from decimal import Decimal

import pytest

from jewelerp.inventory_domain.domain.entities.stock_item import ItemStatus, StockItem
from jewelerp.inventory_domain.domain.services.stock_status_service import (
    normalize_stock_fields,
    normalize_stock_item,
    normalize_stock_status,
)


@pytest.mark.parametrize(
    "quantity, status, expected",
    [
        (0, ItemStatus.IN_STOCK, ItemStatus.SOLD),
        (0, ItemStatus.RESERVED, ItemStatus.SOLD),
        (0, ItemStatus.SOLD, ItemStatus.SOLD),
        (3, ItemStatus.SOLD, ItemStatus.IN_STOCK),
        (3, ItemStatus.IN_SERVICE, ItemStatus.IN_SERVICE),
        (3, ItemStatus.RESERVED, ItemStatus.RESERVED),
        (1, "In Stock", ItemStatus.IN_STOCK),
    ],
)
def test_normalize_stock_status(quantity, status, expected) -> None:
    assert normalize_stock_status(quantity, status) == expected


def test_normalize_stock_item_returns_copy(sample_stock_item) -> None:
    sold_out = StockItem(sku="X", name="X", quantity_available=0, status=ItemStatus.IN_STOCK)

    normalized = normalize_stock_item(sold_out)

    assert normalized.status == ItemStatus.SOLD
    assert sold_out.status == ItemStatus.IN_STOCK


def test_normalize_stock_fields_adds_status(sample_stock_item) -> None:
    assert normalize_stock_fields(sample_stock_item, {"quantity_available": 0}) == {
        "quantity_available": 0,
        "status": ItemStatus.SOLD,
    }


def test_normalize_stock_fields_keeps_explicit_status_unless_quantity_disagrees(sample_stock_item) -> None:
    fields = normalize_stock_fields(sample_stock_item, {"status": ItemStatus.SOLD})
    assert fields["status"] == ItemStatus.IN_STOCK

    fields = normalize_stock_fields(sample_stock_item, {"status": ItemStatus.RESERVED, "unit_price": Decimal("300")})
    assert fields == {"status": ItemStatus.RESERVED, "unit_price": Decimal("300")}


def test_normalize_stock_fields_rejects_negative_quantity(sample_stock_item) -> None:
    with pytest.raises(ValueError):
        normalize_stock_fields(sample_stock_item, {"quantity_available": -1})


def test_stock_item_entity_coerces_and_validates() -> None:
    item = StockItem(sku="S", name="Stud", quantity_available="4", unit_cost="12.345", status="Reserved")

    assert item.quantity_available == 4
    assert item.unit_cost == Decimal("12.35")
    assert item.status == ItemStatus.RESERVED
    assert item.total_value == Decimal("49.40")
    assert item.is_low_stock is False

    with pytest.raises(ValueError):
        StockItem(sku="S", name="Stud", quantity_available=-1)
