# jewelerp/common/infrastructure/mysql_base_repository.py
"""Shared connection handling for the MySQL repositories."""

import logging
from typing import Any, Optional, Sequence

import mysql.connector
from mysql.connector import Error

from jewelerp.common.config.settings import settings
from jewelerp.common.exceptions.custom_exceptions import DatabaseError

logger = logging.getLogger(__name__)


class MySQLRepositoryBase:
    """Owns one lazily-opened connection; every write commits or rolls back on its own."""

    # Subclasses set their CREATE TABLE statement
    create_table_query: str = ""
    table_name: str = ""

    def __init__(self) -> None:
        """Initializes the repository."""
        self._connection = None

    def _get_connection(self):
        """Establishes or returns an active MySQL database connection."""
        if not self._connection or not self._connection.is_connected():
            try:
                self._connection = mysql.connector.connect(
                    host=settings.DB_HOST,
                    database=settings.DB_DATABASE,
                    user=settings.DB_USER,
                    password=settings.DB_PASSWORD,
                    autocommit=False,  # Better control over transactions
                    charset="utf8mb4",
                    use_unicode=True,
                )
            except Error as e:
                raise DatabaseError(f"Failed to connect to MySQL: {e}", original_exception=e)
        return self._connection

    def create_tables(self) -> None:
        """Creates the repository's table if it does not exist."""
        conn = self._get_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute(self.create_table_query)
            conn.commit()
            logger.info(f"Table {self.table_name} checked/created.")
        except Error as e:
            self._rollback(conn)
            raise DatabaseError(f"Error creating table {self.table_name}: {e}", original_exception=e)
        finally:
            self._close_cursor(cursor)

    def _execute_write(self, query: str, params: Sequence[Any], error_message: str) -> Optional[int]:
        """Runs one INSERT/UPDATE/DELETE and commits. Returns lastrowid."""
        conn = self._get_connection()
        cursor = None
        committing = False
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            committing = True
            conn.commit()
            return cursor.lastrowid
        except Error as e:
            self._rollback(conn)
            # A failed COMMIT may still have been applied by the server
            raise DatabaseError(f"{error_message}: {e}", original_exception=e, outcome_unknown=committing)
        finally:
            self._close_cursor(cursor)

    def _fetch_one(self, query: str, params: Sequence[Any], error_message: str) -> Optional[dict]:
        conn = self._get_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(query, params)
            return cursor.fetchone()
        except Error as e:
            raise DatabaseError(f"{error_message}: {e}", original_exception=e)
        finally:
            self._close_cursor(cursor)

    def _fetch_all(self, query: str, params: Sequence[Any], error_message: str) -> list[dict]:
        conn = self._get_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(query, params)
            return cursor.fetchall()
        except Error as e:
            raise DatabaseError(f"{error_message}: {e}", original_exception=e)
        finally:
            self._close_cursor(cursor)

    @staticmethod
    def _rollback(conn) -> None:
        """Rolls back; on a dropped connection the server has already discarded the transaction."""
        try:
            conn.rollback()
        except Error as e:
            logger.warning(f"Rollback failed: {e}")

    @staticmethod
    def _close_cursor(cursor) -> None:
        if cursor is None:
            return
        try:
            cursor.close()
        except Error as e:
            logger.warning(f"Closing cursor failed: {e}")

    @staticmethod
    def _build_update(table: str, column_map: dict[str, str], fields: dict[str, Any]) -> tuple[str, list[Any]]:
        """Builds `UPDATE table SET ... WHERE id = %s` from entity attribute names."""
        unknown = set(fields) - set(column_map)
        if unknown:
            raise DatabaseError(f"Unknown fields for {table}: {', '.join(sorted(unknown))}")
        assignments = ", ".join(f"{column_map[name]} = %s" for name in fields)
        values = [getattr(value, "value", value) for value in fields.values()]
        return f"UPDATE {table} SET {assignments} WHERE id = %s", values

    def __del__(self) -> None:
        """Closes the database connection when the object is destroyed."""
        if self._connection and self._connection.is_connected():
            self._connection.close()
