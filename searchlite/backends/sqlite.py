"""SQLite FTS5 storage engine."""

import logging
import sqlite3
import threading
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Any

from ..exceptions import EngineExecutionError, IndexMutationError
from ..models import ID_FIELD, RESERVED_FIELDS, Column
from .base import StorageEngine

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    """Quote a table or column name for use in SQL."""
    return '"' + name.replace('"', '""') + '"'


class SQLiteEngine(StorageEngine):
    """Full-text storage on top of SQLite FTS5 virtual tables."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._lock = threading.RLock()
        self._transaction_active = threading.local()
        self.conn: sqlite3.Connection | None = sqlite3.connect(
            self.db_path, check_same_thread=False
        )
        self.connection.row_factory = sqlite3.Row

    @property
    def connection(self) -> sqlite3.Connection:
        """Get the connection, ensuring it exists."""
        if self.conn is None:
            raise RuntimeError("Database connection not initialized")
        return self.conn

    def _commit(self) -> None:
        if not getattr(self._transaction_active, "active", False):
            self.connection.commit()

    def create_fulltext_table(
        self, relation: str, columns: Sequence[Column], token_chars: str
    ) -> None:
        """Drop and create an FTS5 virtual table."""
        definitions = ", ".join(column.to_sql() for column in columns)
        tokenize = f"unicode61 remove_diacritics 2 tokenchars '{token_chars}'"
        table = quote_identifier(relation)

        with self._lock:
            try:
                self.connection.execute(f"DROP TABLE IF EXISTS {table}")
                self.connection.execute(
                    f"CREATE VIRTUAL TABLE {table} USING fts5("
                    f'{definitions}, tokenize="{tokenize}")'
                )
                self._commit()
            except sqlite3.Error as e:
                raise IndexMutationError(
                    f"Cannot create full-text table {relation}: {e}"
                ) from e

    def insert(self, relation: str, record: Mapping[str, Any]) -> None:
        """Insert a record into the relation."""
        names = ", ".join(quote_identifier(name) for name in record)
        placeholders = ", ".join("?" for _ in record)

        with self._lock:
            try:
                self.connection.execute(
                    f"INSERT INTO {quote_identifier(relation)} ({names}) "
                    f"VALUES ({placeholders})",
                    tuple(record.values()),
                )
                self._commit()
            except sqlite3.Error as e:
                raise IndexMutationError(
                    f"Cannot insert into {relation}: {e}"
                ) from e

    def delete(self, relation: str, document_id: str) -> int:
        """Delete every row with the given id."""
        with self._lock:
            try:
                cursor = self.connection.execute(
                    f"DELETE FROM {quote_identifier(relation)} "
                    f"WHERE {quote_identifier(ID_FIELD)} = ?",
                    (document_id,),
                )
                self._commit()
            except sqlite3.Error as e:
                raise IndexMutationError(
                    f"Cannot delete {document_id!r} from {relation}: {e}"
                ) from e
            return cursor.rowcount

    def match_query(
        self,
        relation: str,
        expression: str,
        columns: Sequence[str],
        ranking_weights: Sequence[float] | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """Run an FTS5 MATCH query ordered by rank."""
        table = quote_identifier(relation)
        projection = ", ".join(quote_identifier(name) for name in columns)

        sql = f"SELECT {projection} FROM {table} WHERE {table} MATCH ?"
        params: list[Any] = [expression]

        if ranking_weights is not None:
            sql += " AND rank MATCH ?"
            params.append(bm25_config(ranking_weights))

        sql += " ORDER BY rank LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        with self._lock:
            try:
                cursor = self.connection.execute(sql, params)
                return [dict(row) for row in cursor.fetchall()]
            except sqlite3.Error as e:
                raise EngineExecutionError(
                    f"Match query {expression!r} failed: {e}"
                ) from e

    def describe_columns(self, relation: str) -> list[str]:
        """Get column names in table order."""
        with self._lock:
            try:
                cursor = self.connection.execute(
                    f"PRAGMA table_info({quote_identifier(relation)})"
                )
                return [row["name"] for row in cursor]
            except sqlite3.Error as e:
                raise EngineExecutionError(
                    f"Cannot describe {relation}: {e}"
                ) from e

    def validate_table(self, relation: str) -> bool:
        """Check the relation exists and carries the reserved columns."""
        with self._lock:
            try:
                cursor = self.connection.execute(
                    "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
                    (relation,),
                )
                if cursor.fetchone() is None:
                    return False
                columns = self.describe_columns(relation)
            except (sqlite3.Error, EngineExecutionError) as e:
                logger.debug(f"Relation {relation} is not valid: {e}")
                return False

        return all(name in columns for name in RESERVED_FIELDS)

    def count(self, relation: str) -> int:
        """Number of rows stored in the relation."""
        with self._lock:
            try:
                cursor = self.connection.execute(
                    f"SELECT COUNT(*) AS count FROM {quote_identifier(relation)}"
                )
                return cursor.fetchone()["count"]
            except sqlite3.Error as e:
                raise EngineExecutionError(f"Cannot count {relation}: {e}") from e

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.connection.close()
            self.conn = None

    def supports_transactions(self) -> bool:
        """SQLite supports transactions."""
        return True

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Transaction context manager."""
        with self._lock:
            outer_active = getattr(self._transaction_active, "active", False)
            self._transaction_active.active = True
            in_transaction = self.connection.in_transaction

            if not in_transaction:
                self.connection.execute("BEGIN")

            try:
                yield
                if not in_transaction:
                    self.connection.commit()
            except Exception:
                if not in_transaction:
                    self.connection.rollback()
                raise
            finally:
                self._transaction_active.active = outer_active


def bm25_config(weights: Sequence[float]) -> str:
    """Render positional weights as an FTS5 rank configuration.

    FTS5 parses the configuration as SQL, so weights are written in plain
    decimal notation rather than with an exponent.
    """
    return "bm25(" + ", ".join(_decimal_literal(weight) for weight in weights) + ")"


def _decimal_literal(weight: float) -> str:
    text = format(Decimal(repr(float(weight))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
