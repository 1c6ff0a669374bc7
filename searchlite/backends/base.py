"""Base storage engine interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from ..models import Column


class StorageEngine(ABC):
    """Abstract interface for full-text storage engines."""

    @abstractmethod
    def create_fulltext_table(
        self, relation: str, columns: Sequence[Column], token_chars: str
    ) -> None:
        """Drop and recreate a full-text searchable relation.

        Args:
            relation: Table name
            columns: Ordered column definitions
            token_chars: Extra characters the tokenizer keeps inside words

        Raises:
            IndexMutationError: If the table cannot be created
        """
        pass

    @abstractmethod
    def insert(self, relation: str, record: Mapping[str, Any]) -> None:
        """Insert a single record.

        Raises:
            IndexMutationError: If the insert fails
        """
        pass

    @abstractmethod
    def delete(self, relation: str, document_id: str) -> int:
        """Delete records by id.

        Returns:
            Number of rows removed

        Raises:
            IndexMutationError: If the delete fails
        """
        pass

    @abstractmethod
    def match_query(
        self,
        relation: str,
        expression: str,
        columns: Sequence[str],
        ranking_weights: Sequence[float] | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """Run a match expression, best ranked rows first.

        Args:
            relation: Table name
            expression: Compiled match expression
            columns: Columns to project
            ranking_weights: Optional positional weights for the ranking function
            offset: Rows to skip
            limit: Maximum rows to return

        Raises:
            EngineExecutionError: If the engine rejects the query
        """
        pass

    @abstractmethod
    def describe_columns(self, relation: str) -> list[str]:
        """Get the live column names of a relation in table order."""
        pass

    @abstractmethod
    def validate_table(self, relation: str) -> bool:
        """Check that a relation exists and is usable."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close engine connections."""
        pass

    def supports_transactions(self) -> bool:
        """Check if engine supports transactions."""
        return False

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group operations into one atomic unit where supported."""
        yield

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
