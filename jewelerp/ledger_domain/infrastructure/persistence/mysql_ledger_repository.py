# jewelerp/ledger_domain/infrastructure/persistence/mysql_ledger_repository.py
"""MySQL implementation of the general ledger repository."""

import logging
from dataclasses import replace

from mysql.connector import Error

from jewelerp.common.exceptions.custom_exceptions import DatabaseError
from jewelerp.common.infrastructure.mysql_base_repository import MySQLRepositoryBase
from jewelerp.common.utils.date_utils import format_date_for_db, parse_db_date
from jewelerp.ledger_domain.domain.entities.ledger_entry import LedgerEntry
from jewelerp.ledger_domain.domain.repositories.ledger_repository import ILedgerRepository

logger = logging.getLogger(__name__)


def ledger_entry_from_row(row: dict) -> LedgerEntry:
    return LedgerEntry(
        id=row["id"],
        entry_date=parse_db_date(row["entry_date"]),
        account_code=row["account_code"],
        description=row.get("description") or "",
        debit=row.get("debit") or 0,
        credit=row.get("credit") or 0,
        related_id=row.get("related_id"),
        related_type=row.get("related_type"),
    )


class MySQLLedgerRepository(MySQLRepositoryBase, ILedgerRepository):
    """Append-only MySQL ledger; rows are never updated or deleted."""

    table_name = "general_ledger_entries"
    create_table_query = """
    CREATE TABLE IF NOT EXISTS general_ledger_entries (
        id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
        entry_date DATE NOT NULL,
        account_code VARCHAR(16) NOT NULL,
        description VARCHAR(512),
        debit DECIMAL(18, 4) NOT NULL DEFAULT 0,
        credit DECIMAL(18, 4) NOT NULL DEFAULT 0,
        related_id BIGINT UNSIGNED,
        related_type VARCHAR(32),
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        INDEX idx_entry_date (entry_date),
        INDEX idx_account_code (account_code)
    ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
    """

    def append_many(self, entries: list[LedgerEntry]) -> list[LedgerEntry]:
        """
        Inserts all entries of one business event inside a single commit,
        so an event is either fully posted or not posted at all.
        """
        if not entries:
            return []

        conn = self._get_connection()

        insert_query = """
        INSERT INTO general_ledger_entries
        (entry_date, account_code, description, debit, credit, related_id, related_type)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        """

        stored: list[LedgerEntry] = []
        cursor = None
        committing = False
        try:
            cursor = conn.cursor()
            # Row-by-row inside one transaction so each entry gets its id back
            for entry in entries:
                cursor.execute(
                    insert_query,
                    (
                        format_date_for_db(entry.entry_date),
                        entry.account_code,
                        entry.description,
                        entry.debit,
                        entry.credit,
                        entry.related_id,
                        entry.related_type,
                    ),
                )
                stored.append(replace(entry, id=cursor.lastrowid))
            committing = True
            conn.commit()
            logger.debug(f"Appended {len(entries)} ledger entries")
        except Error as e:
            self._rollback(conn)
            raise DatabaseError(
                f"Error appending ledger entries: {e}", original_exception=e, outcome_unknown=committing
            )
        finally:
            self._close_cursor(cursor)
        return stored

    def list_entries(self) -> list[LedgerEntry]:
        """Retrieves all ledger entries ordered by entry date."""
        rows = self._fetch_all(
            "SELECT * FROM general_ledger_entries ORDER BY entry_date, id", (), "Error fetching ledger entries"
        )
        return [ledger_entry_from_row(row) for row in rows]
