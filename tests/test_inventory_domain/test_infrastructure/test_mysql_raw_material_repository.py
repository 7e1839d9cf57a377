# tests/test_inventory_domain/test_infrastructure/test_mysql_raw_material_repository.py

from decimal import Decimal
from unittest.mock import Mock

import pytest

from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot, UnitOfMeasure
from jewelerp.inventory_domain.infrastructure.persistence.mysql_raw_material_repository import (
    MySQLRawMaterialRepository,
)


@pytest.fixture
def mock_cursor(mocker) -> Mock:
    mock_connection = mocker.patch("mysql.connector.connect")
    cursor = Mock()
    mock_connection.return_value.cursor.return_value = cursor
    return cursor


def test_mysql_raw_material_repository_round_trip_columns(mock_cursor) -> None:
    mock_cursor.fetchall.return_value = [
        {"id": 1, "name": "24K Gold", "unit_of_measure": "Gram", "current_stock": Decimal("49.5000"), "cost_per_unit": Decimal("80.0000")}
    ]
    repo = MySQLRawMaterialRepository()

    materials = repo.get_all_raw_materials()
    repo.update_raw_material(1, {"quantity_on_hand": Decimal("39.5")})

    assert materials[0].unit_of_measure == UnitOfMeasure.GRAM
    assert materials[0].quantity_on_hand == Decimal("49.5")
    assert mock_cursor.execute.call_args[0] == (
        "UPDATE raw_materials SET current_stock = %s WHERE id = %s",
        (Decimal("39.5"), 1),
    )


def test_mysql_raw_material_repository_create_returns_new_id(mock_cursor) -> None:
    mock_cursor.lastrowid = 9

    created = MySQLRawMaterialRepository().create_raw_material(
        RawMaterialLot(name="Silver 925", unit_of_measure=UnitOfMeasure.GRAM, quantity_on_hand=Decimal("120"), unit_cost=Decimal("1.2"))
    )

    assert created.id == 9
    query, params = mock_cursor.execute.call_args[0]
    assert "INSERT INTO raw_materials" in query
    assert params == ("Silver 925", "Gram", Decimal("120"), Decimal("1.20"))


def test_mysql_raw_material_repository_delete(mock_cursor) -> None:
    MySQLRawMaterialRepository().delete_raw_material(4)

    assert mock_cursor.execute.call_args[0] == ("DELETE FROM raw_materials WHERE id = %s", (4,))
