"""Schema derivation for heterogeneous document batches."""

from collections.abc import Iterable, Mapping

from ..exceptions import SchemaDerivationError
from ..models import ID_FIELD, RESERVED_FIELDS, TYPE_FIELD, Column, Document, Schema

# Column names FTS5 refuses to create
FORBIDDEN_COLUMNS = frozenset({"rank", "rowid"})


def derive_schema(
    documents: Iterable[Document], relation: str | None = None
) -> Schema:
    """Compute the columns needed to store a batch of documents.

    The result holds every field seen in the batch, in first-seen order,
    followed by the unindexed ``id`` and ``_type`` columns. Column names
    are compared case-insensitively, as the engine does.

    Args:
        documents: Documents to be indexed together
        relation: Name of the table the schema is for, which no field may use

    Returns:
        Schema with indexed columns first and reserved columns last

    Raises:
        SchemaDerivationError: If the batch is empty or inconsistent
    """
    documents = list(documents)
    if not documents:
        raise SchemaDerivationError(
            "Cannot derive a schema from an empty document batch"
        )

    fields: dict[str, str] = {name.lower(): name for name in RESERVED_FIELDS}
    seen_ids: set[str] = set()

    for position, document in enumerate(documents):
        if not isinstance(document, Mapping):
            raise SchemaDerivationError(
                f"Document at position {position} is not a mapping"
            )

        document_id = document.get(ID_FIELD)
        if document_id is None or document_id == "":
            raise SchemaDerivationError(
                f"Document at position {position} has no {ID_FIELD!r} field"
            )
        document_id = str(document_id)
        if document_id in seen_ids:
            raise SchemaDerivationError(f"Duplicate document id {document_id!r}")
        seen_ids.add(document_id)

        for name in document:
            _check_column_name(name, relation)
            existing = fields.setdefault(name.lower(), name)
            if existing != name:
                raise SchemaDerivationError(
                    f"Field name {name!r} collides with {existing!r}"
                )

    columns = [Column(name) for name in fields.values() if name not in RESERVED_FIELDS]
    columns.append(Column(ID_FIELD, indexed=False))
    columns.append(Column(TYPE_FIELD, indexed=False))

    return Schema(tuple(columns))


def _check_column_name(name: object, relation: str | None) -> None:
    if not isinstance(name, str) or not name:
        raise SchemaDerivationError(f"Invalid field name {name!r}")
    if '"' in name or "\x00" in name:
        raise SchemaDerivationError(f"Field name {name!r} contains reserved characters")
    if name.lower() in FORBIDDEN_COLUMNS:
        raise SchemaDerivationError(f"Field name {name!r} is reserved by the engine")
    if relation is not None and name.lower() == relation.lower():
        raise SchemaDerivationError(
            f"Field name {name!r} is the name of the index table"
        )
