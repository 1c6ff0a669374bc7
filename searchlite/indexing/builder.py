"""Full index replacement and incremental maintenance."""

import logging
from collections.abc import Iterable
from typing import Any

from ..backends.base import StorageEngine
from ..models import ID_FIELD, TOKEN_CHARS, Document, Schema
from .fuzzy import FuzzyExpander
from .schema import derive_schema

logger = logging.getLogger(__name__)


def prepare_record(document: Document) -> dict[str, Any]:
    """Normalize document values to what the engine stores.

    Strings and ``None`` pass through, sequences are joined with spaces and
    other scalars are converted with ``str``.
    """
    record: dict[str, Any] = {}
    for field, value in document.items():
        if value is None or isinstance(value, str):
            record[field] = value
        elif isinstance(value, (list, tuple)):
            record[field] = " ".join(str(item) for item in value)
        else:
            record[field] = str(value)
    return record


class IndexBuilder:
    """Builds and maintains the full-text relation.

    Coordinates schema derivation, table creation and fuzzy expansion.
    """

    def __init__(
        self,
        engine: StorageEngine,
        relation: str = "models",
        expander: FuzzyExpander | None = None,
    ):
        """Initialize index builder.

        Args:
            engine: Storage engine holding the relation
            relation: Name of the full-text table
            expander: Fuzzy expander (default: expand every field)
        """
        self.engine = engine
        self.relation = relation
        self.expander = expander or FuzzyExpander()

    def replace(self, documents: Iterable[Document]) -> Schema:
        """Rebuild the index from scratch.

        The schema is derived before anything is dropped, so an invalid
        batch leaves the current index untouched. Drop, create and inserts
        run in a single engine transaction.

        Args:
            documents: Complete set of documents to index

        Returns:
            The schema of the new relation

        Raises:
            SchemaDerivationError: If the batch is empty or inconsistent
            IndexMutationError: If the engine fails to rebuild the table
        """
        documents = list(documents)
        schema = derive_schema(documents, self.relation)

        with self.engine.transaction():
            self.engine.create_fulltext_table(
                self.relation, schema.columns, TOKEN_CHARS
            )
            for document in documents:
                self.insert(document)

        logger.info(
            f"Replaced index {self.relation} with {len(documents)} documents "
            f"across {len(schema.indexed_names)} searchable columns"
        )
        return schema

    def insert(self, document: Document) -> None:
        """Add a single document to the existing relation."""
        record = prepare_record(document)
        if self.expander.enabled:
            record = self.expander.expand(record)
        self.engine.insert(self.relation, record)

    def delete(self, document_id: str) -> int:
        """Remove a document from the relation.

        Returns:
            Number of rows removed
        """
        removed = self.engine.delete(self.relation, str(document_id))
        if not removed:
            logger.debug(f"No document with {ID_FIELD} {document_id!r} to delete")
        return removed
