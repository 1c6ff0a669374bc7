"""Data models for documents, schemas, options and results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import msgspec

from .exceptions import InvalidInput

ID_FIELD = "id"
TYPE_FIELD = "_type"
RESERVED_FIELDS = (ID_FIELD, TYPE_FIELD)

# Characters the engine tokenizer keeps inside words
TOKEN_CHARS = "@?!-_&:"

Document = Mapping[str, Any]


class BooleanOperator(str, Enum):
    """Boolean operators understood by the match syntax."""

    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    @classmethod
    def parse(cls, value: str | BooleanOperator) -> BooleanOperator:
        """Convert a string to an operator, rejecting unknown values."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidInput(
                f"Unknown operator {value!r}, expected one of AND, OR, NOT"
            ) from None


@dataclass(frozen=True)
class Column:
    """A column of the full-text relation."""

    name: str
    indexed: bool = True

    def to_sql(self) -> str:
        """Render the column definition for an FTS5 table."""
        quoted = '"' + self.name + '"'
        return quoted if self.indexed else f"{quoted} UNINDEXED"


@dataclass(frozen=True)
class Schema:
    """Ordered set of columns derived from a document batch."""

    columns: tuple[Column, ...]

    @property
    def names(self) -> list[str]:
        return [column.name for column in self.columns]

    @property
    def indexed_names(self) -> list[str]:
        return [column.name for column in self.columns if column.indexed]

    def __len__(self) -> int:
        return len(self.columns)

    def __contains__(self, name: object) -> bool:
        return any(column.name == name for column in self.columns)


class SearchOptions(msgspec.Struct, frozen=True, kw_only=True):
    """Per-call search options.

    ``operator`` and ``weights`` override the provider configuration when
    set; ``None`` means "use the configured value".
    """

    page: int = 1
    limit: int = 10
    operator: str | None = None
    weights: dict[str, float] | None = None

    def __post_init__(self):
        if isinstance(self.page, bool) or not isinstance(self.page, int):
            raise InvalidInput(f"page must be an integer, got {self.page!r}")
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise InvalidInput(f"limit must be an integer, got {self.limit!r}")
        if self.page < 1:
            raise InvalidInput(f"page must be positive, got {self.page}")
        if self.limit < 1:
            raise InvalidInput(f"limit must be positive, got {self.limit}")
        if self.operator is not None:
            BooleanOperator.parse(self.operator)

    @property
    def offset(self) -> int:
        """Number of rows skipped before the current page."""
        return (self.page - 1) * self.limit


class ResultEnvelope(msgspec.Struct, frozen=True, kw_only=True):
    """Paginated search result.

    ``total`` is the number of rows fetched for this page, not the number
    of matching documents in the whole index.
    """

    hits: list[dict[str, Any]] = msgspec.field(default_factory=list)
    page: int = 1
    total: int = 0
    limit: int = 10

    @classmethod
    def empty(cls, page: int, limit: int) -> ResultEnvelope:
        """Envelope for a query that produced no matches."""
        return cls(hits=[], page=page, total=0, limit=limit)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def ids(self) -> list[str]:
        return [hit[ID_FIELD] for hit in self.hits]

    def to_dict(self) -> dict[str, Any]:
        """Plain dictionary form of the envelope."""
        return msgspec.to_builtins(self)
