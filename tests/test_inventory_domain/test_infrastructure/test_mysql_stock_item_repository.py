# tests/test_inventory_domain/test_infrastructure/test_mysql_stock_item_repository.py

from decimal import Decimal
from unittest.mock import Mock

import pytest
from mysql.connector import Error

from jewelerp.common.exceptions.custom_exceptions import DatabaseError
from jewelerp.inventory_domain.domain.entities.stock_item import ItemStatus, ItemType
from jewelerp.inventory_domain.infrastructure.persistence.mysql_stock_item_repository import (
    MySQLStockItemRepository,
)


@pytest.fixture
def mock_cursor(mocker) -> Mock:
    mock_connection = mocker.patch("mysql.connector.connect")
    cursor = Mock()
    mock_connection.return_value.cursor.return_value = cursor
    return cursor


def test_mysql_stock_item_repository_create_tables(mocker) -> None:
    mock_connection = mocker.patch("mysql.connector.connect")
    mock_cursor = Mock()
    mock_connection.return_value.cursor.return_value = mock_cursor

    repo = MySQLStockItemRepository()
    repo.create_tables()

    mock_connection.assert_called_once()
    assert mock_connection.call_args[1]["autocommit"] is False
    assert "CREATE TABLE IF NOT EXISTS inventory_items" in mock_cursor.execute.call_args[0][0]
    mock_connection.return_value.commit.assert_called_once()
    mock_cursor.close.assert_called_once()


def test_mysql_stock_item_repository_get_stock_item_maps_columns(mock_cursor) -> None:
    mock_cursor.fetchone.return_value = {
        "id": 7,
        "sku": "RING-001",
        "name": "Gold Ring",
        "item_type": "Finished Good",
        "status": "In Stock",
        "location": "Showcase A",
        "qty_available": 5,
        "landed_cost": Decimal("100.0000"),
        "retail_price": Decimal("250.0000"),
        "reorder_point": 2,
        "certificate_url": None,
    }

    item = MySQLStockItemRepository().get_stock_item(7)

    assert mock_cursor.execute.call_args[0] == ("SELECT * FROM inventory_items WHERE id = %s LIMIT 1", (7,))
    assert item.id == 7
    assert item.item_type == ItemType.FINISHED_GOOD
    assert item.quantity_available == 5
    assert item.unit_cost == Decimal("100.00")
    assert item.unit_price == Decimal("250.00")
    assert item.reorder_threshold == 2


def test_mysql_stock_item_repository_get_missing_item(mock_cursor) -> None:
    mock_cursor.fetchone.return_value = None
    assert MySQLStockItemRepository().get_stock_item(99) is None


def test_mysql_stock_item_repository_create_returns_new_id(mock_cursor, sample_stock_item) -> None:
    mock_cursor.lastrowid = 42

    created = MySQLStockItemRepository().create_stock_item(sample_stock_item)

    assert created.id == 42
    query, params = mock_cursor.execute.call_args[0]
    assert query.strip().startswith("INSERT INTO inventory_items")
    assert params[:5] == ("RING-001", "Gold Ring", "Finished Good", "In Stock", "Showcase A")


def test_mysql_stock_item_repository_update_builds_partial_statement(mock_cursor) -> None:
    MySQLStockItemRepository().update_stock_item(
        1, {"quantity_available": 0, "status": ItemStatus.SOLD, "unit_cost": Decimal("90.00")}
    )

    query, params = mock_cursor.execute.call_args[0]
    assert query == "UPDATE inventory_items SET qty_available = %s, status = %s, landed_cost = %s WHERE id = %s"
    assert params == (0, "Sold", Decimal("90.00"), 1)


def test_mysql_stock_item_repository_update_rejects_unknown_field(mock_cursor) -> None:
    with pytest.raises(DatabaseError):
        MySQLStockItemRepository().update_stock_item(1, {"colour": "gold"})
    mock_cursor.execute.assert_not_called()


def test_mysql_stock_item_repository_write_error_rolls_back(mocker) -> None:
    mock_connection = mocker.patch("mysql.connector.connect")
    mock_cursor = Mock()
    mock_cursor.execute.side_effect = Error("Lock wait timeout exceeded")
    mock_connection.return_value.cursor.return_value = mock_cursor

    with pytest.raises(DatabaseError) as exc_info:
        MySQLStockItemRepository().delete_stock_item(1)

    assert "Error deleting stock item 1" in str(exc_info.value)
    assert exc_info.value.outcome_unknown is False
    mock_connection.return_value.rollback.assert_called_once()
    mock_cursor.close.assert_called_once()


def test_mysql_stock_item_repository_connection_failure(mocker) -> None:
    mocker.patch("mysql.connector.connect", side_effect=Error("Access denied"))

    with pytest.raises(DatabaseError) as exc_info:
        MySQLStockItemRepository().get_all_stock_items()

    assert "Failed to connect to MySQL" in str(exc_info.value)
