# tests/test_inventory_domain/test_application/test_inventory_service.py
"""Tests for the Inventory Application Service."""

from decimal import Decimal

import pytest

from jewelerp.common.exceptions.custom_exceptions import NotFoundError, ValidationError
from jewelerp.inventory_domain.application.inventory_service import InventoryApplicationService
from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot, UnitOfMeasure
from jewelerp.inventory_domain.domain.entities.stock_item import ItemStatus, ItemType, StockItem


def test_add_item_normalizes_status(inventory_service) -> None:
    created = inventory_service.add_item(
        StockItem(sku="GEM-1", name="Sapphire", item_type=ItemType.LOOSE_STONE, quantity_available=0)
    )

    assert created.id == 2
    assert created.status == ItemStatus.SOLD
    assert inventory_service.get_item(2).item_type == ItemType.LOOSE_STONE


def test_add_item_requires_name_and_sku(inventory_service) -> None:
    with pytest.raises(ValidationError):
        inventory_service.add_item(StockItem(sku="", name="Nameless"))


def test_update_item_zero_quantity_marks_sold(inventory_service) -> None:
    updated = inventory_service.update_item(1, {"quantity_available": 0})

    assert updated.quantity_available == 0
    assert updated.status == ItemStatus.SOLD


def test_update_item_restocking_sold_item(inventory_service) -> None:
    inventory_service.update_item(1, {"quantity_available": 0})

    updated = inventory_service.update_item(1, {"quantity_available": 2})

    assert updated.status == ItemStatus.IN_STOCK


def test_update_item_coerces_values(inventory_service) -> None:
    updated = inventory_service.update_item(1, {"unit_price": "275.555", "location": "Vault"})

    assert updated.unit_price == Decimal("275.56")
    assert updated.location == "Vault"
    assert updated.status == ItemStatus.IN_STOCK


@pytest.mark.parametrize(
    "fields",
    [
        {"quantity_available": -3},
        {"quantity_available": "many"},
        {"status": "Lost"},
        {"id": 5},
        {"colour": "gold"},
    ],
)
def test_update_item_rejects_invalid_fields(inventory_service, stock_item_repo, fields) -> None:
    with pytest.raises(ValidationError) as exc_info:
        inventory_service.update_item(1, fields)

    assert str(exc_info.value).endswith("No changes were made.")
    assert stock_item_repo.get_stock_item(1).quantity_available == 5


def test_update_unknown_item(inventory_service) -> None:
    with pytest.raises(NotFoundError):
        inventory_service.update_item(99, {"quantity_available": 1})


def test_delete_item(inventory_service) -> None:
    inventory_service.delete_item(1)

    assert inventory_service.list_items() == []
    with pytest.raises(NotFoundError):
        inventory_service.delete_item(1)


def test_add_and_list_raw_materials(inventory_service) -> None:
    created = inventory_service.add_raw_material(
        RawMaterialLot(name="Diamond Melee", unit_of_measure=UnitOfMeasure.CARAT, quantity_on_hand="12.75", unit_cost=450)
    )

    assert created.id == 2
    assert [m.name for m in inventory_service.list_raw_materials()] == ["24K Gold", "Diamond Melee"]


@pytest.mark.parametrize(
    "material",
    [
        RawMaterialLot(name=""),
        RawMaterialLot(name="Silver", quantity_on_hand=Decimal("-1")),
        RawMaterialLot(name="Silver", unit_cost=Decimal("-1")),
    ],
)
def test_add_raw_material_validation(inventory_service, material) -> None:
    with pytest.raises(ValidationError):
        inventory_service.add_raw_material(material)


def test_get_item_uses_repository(mock_stock_item_repository, sample_stock_item) -> None:
    mock_stock_item_repository.get_stock_item.return_value = sample_stock_item
    service = InventoryApplicationService(stock_item_repo=mock_stock_item_repository, raw_material_repo=None)

    assert service.get_item(1) == sample_stock_item
    mock_stock_item_repository.get_stock_item.assert_called_once_with(1)
