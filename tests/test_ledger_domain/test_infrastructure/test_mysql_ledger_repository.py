# tests/test_ledger_domain/test_infrastructure/test_mysql_ledger_repository.py

from datetime import date
from decimal import Decimal
from unittest.mock import Mock

import pytest
from mysql.connector import Error
from mysql.connector.errors import OperationalError

from jewelerp.common.exceptions.custom_exceptions import DatabaseError
from jewelerp.ledger_domain.domain.entities.ledger_entry import LedgerEntry
from jewelerp.ledger_domain.infrastructure.persistence.mysql_ledger_repository import MySQLLedgerRepository


@pytest.fixture
def sale_entries() -> list[LedgerEntry]:
    return [
        LedgerEntry(date(2024, 5, 17), "1001", "Sale", debit=Decimal("500"), related_id=1, related_type="inventory_item"),
        LedgerEntry(date(2024, 5, 17), "4001", "Sale", credit=Decimal("500"), related_id=1, related_type="inventory_item"),
    ]


def test_mysql_ledger_repository_append_many_commits_once(mocker, sale_entries) -> None:
    mock_connection = mocker.patch("mysql.connector.connect")
    mock_cursor = Mock()
    mock_cursor.lastrowid = 10
    mock_connection.return_value.cursor.return_value = mock_cursor

    stored = MySQLLedgerRepository().append_many(sale_entries)

    assert mock_cursor.execute.call_count == 2
    query, params = mock_cursor.execute.call_args_list[0][0]
    assert "INSERT INTO general_ledger_entries" in query
    assert params == ("2024-05-17", "1001", "Sale", Decimal("500.00"), Decimal("0.00"), 1, "inventory_item")
    mock_connection.return_value.commit.assert_called_once()
    assert [e.id for e in stored] == [10, 10]
    assert stored[0].debit == Decimal("500.00")


def test_mysql_ledger_repository_append_many_rolls_back_whole_event(mocker, sale_entries) -> None:
    mock_connection = mocker.patch("mysql.connector.connect")
    mock_cursor = Mock()
    mock_cursor.execute.side_effect = [None, Error("Data truncated for column 'credit'")]
    mock_connection.return_value.cursor.return_value = mock_cursor

    with pytest.raises(DatabaseError):
        MySQLLedgerRepository().append_many(sale_entries)

    mock_connection.return_value.commit.assert_not_called()
    mock_connection.return_value.rollback.assert_called_once()
    mock_cursor.close.assert_called_once()


def test_mysql_ledger_repository_append_nothing(mocker) -> None:
    mock_connection = mocker.patch("mysql.connector.connect")

    assert MySQLLedgerRepository().append_many([]) == []
    mock_connection.assert_not_called()


def test_mysql_ledger_repository_list_entries(mocker) -> None:
    mock_connection = mocker.patch("mysql.connector.connect")
    mock_cursor = Mock()
    mock_cursor.fetchall.return_value = [
        {
            "id": 1,
            "entry_date": date(2024, 5, 17),
            "account_code": "1200",
            "description": "PO #3 received",
            "debit": Decimal("1000.0000"),
            "credit": Decimal("0.0000"),
            "related_id": 3,
            "related_type": "purchase_order",
        }
    ]
    mock_connection.return_value.cursor.return_value = mock_cursor

    entries = MySQLLedgerRepository().list_entries()

    assert "ORDER BY entry_date, id" in mock_cursor.execute.call_args[0][0]
    assert entries == [
        LedgerEntry(
            id=1,
            entry_date=date(2024, 5, 17),
            account_code="1200",
            description="PO #3 received",
            debit=Decimal("1000"),
            related_id=3,
            related_type="purchase_order",
        )
    ]


def test_mysql_ledger_repository_lost_connection_raises_database_error(mocker, sale_entries) -> None:
    mock_connection = mocker.patch("mysql.connector.connect")
    mock_connection.return_value.cursor.side_effect = OperationalError("MySQL server has gone away")
    mock_connection.return_value.rollback.side_effect = OperationalError("MySQL server has gone away")

    with pytest.raises(DatabaseError) as exc_info:
        MySQLLedgerRepository().append_many(sale_entries)

    assert "MySQL server has gone away" in str(exc_info.value)
    assert exc_info.value.outcome_unknown is False
    mock_connection.return_value.commit.assert_not_called()


def test_mysql_ledger_repository_failed_commit_has_unknown_outcome(mocker, sale_entries) -> None:
    mock_connection = mocker.patch("mysql.connector.connect")
    mock_connection.return_value.cursor.return_value = Mock()
    mock_connection.return_value.commit.side_effect = OperationalError("Lost connection to MySQL server during query")

    with pytest.raises(DatabaseError) as exc_info:
        MySQLLedgerRepository().append_many(sale_entries)

    assert exc_info.value.outcome_unknown is True
