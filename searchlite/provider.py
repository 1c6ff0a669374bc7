"""Search providers exposed to host applications."""

import logging
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from msgspec import structs

from .backends.base import StorageEngine
from .backends.sqlite import SQLiteEngine
from .config import MEMORY_FILE, ProviderConfig
from .exceptions import ConfigurationError
from .executor import SearchExecutor
from .indexing import FuzzyExpander, IndexBuilder
from .models import Document, ResultEnvelope, SearchOptions

logger = logging.getLogger(__name__)


class Provider(ABC):
    """Abstract interface for search providers."""

    @abstractmethod
    def has_index(self) -> bool:
        """Check if an active index is already present."""
        pass

    @abstractmethod
    def replace(self, documents: Iterable[Document]) -> None:
        """Rebuild the index from a complete set of documents.

        Raises:
            SchemaDerivationError: If the batch is empty or inconsistent
            IndexMutationError: If the rebuild fails
        """
        pass

    @abstractmethod
    def insert(self, document: Document) -> None:
        """Add a document to the index.

        Raises:
            IndexMutationError: If the insert fails
        """
        pass

    @abstractmethod
    def delete(self, document_id: str) -> None:
        """Remove a document from the index.

        Raises:
            IndexMutationError: If the delete fails
        """
        pass

    @abstractmethod
    def search(
        self, query: str, options: SearchOptions | None = None, **overrides: Any
    ) -> ResultEnvelope:
        """Run a query and return one page of hits."""
        pass


class SqliteProvider(Provider):
    """Search provider storing documents in an SQLite FTS5 table."""

    def __init__(
        self,
        config: ProviderConfig | None = None,
        engine: StorageEngine | None = None,
    ):
        """Initialize provider.

        Args:
            config: Provider configuration (default: ``ProviderConfig()``)
            engine: Storage engine to use instead of opening ``config.file``

        Raises:
            ConfigurationError: If the index file cannot be opened
        """
        self.config = config or ProviderConfig()

        if engine is None:
            engine = self._open_engine(self.config.resolve_file())
        self.engine = engine

        self.builder = IndexBuilder(
            engine, self.config.relation, FuzzyExpander(self.config.fuzzy)
        )
        self.executor = SearchExecutor(
            engine,
            self.config.relation,
            operator=self.config.operator,
            weights=self.config.weights,
        )

    @staticmethod
    def _open_engine(location: str) -> SQLiteEngine:
        if location != MEMORY_FILE and not location.startswith("file:"):
            directory = Path(location).parent
            if not directory.exists():
                try:
                    directory.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise ConfigurationError(
                        "file", f"cannot create directory {directory}: {e}"
                    ) from e
                logger.debug(f"Created index directory {directory}")

        try:
            return SQLiteEngine(location)
        except sqlite3.Error as e:
            raise ConfigurationError("file", f"cannot open {location}: {e}") from e

    def has_index(self) -> bool:
        return self.engine.validate_table(self.config.relation)

    def replace(self, documents: Iterable[Document]) -> None:
        self.builder.replace(documents)

    def insert(self, document: Document) -> None:
        self.builder.insert(document)

    def delete(self, document_id: str) -> None:
        self.builder.delete(document_id)

    def search(
        self, query: str, options: SearchOptions | None = None, **overrides: Any
    ) -> ResultEnvelope:
        """Run a query and return one page of hits.

        Args:
            query: Raw user query
            options: Search options
            **overrides: Individual options (``page``, ``limit``,
                ``operator``, ``weights``) applied on top of ``options``

        Returns:
            Result envelope, empty when the query matches nothing or
            cannot be executed
        """
        if options is None:
            options = SearchOptions(**overrides)
        elif overrides:
            options = SearchOptions(**{**structs.asdict(options), **overrides})
        return self.executor.search(query, options)

    def close(self) -> None:
        """Close the underlying engine."""
        self.engine.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
