"""Per-field ranking weights.

The engine's BM25 function takes one weight per column, by position. Weight
tables are keyed by field name instead and resolved against the live column
order on every query, since columns move whenever the index is rebuilt.
"""

from collections.abc import Mapping, Sequence

from .exceptions import InvalidInput
from .models import RESERVED_FIELDS

DEFAULT_WEIGHT = 1


def validate_weights(weights: Mapping[str, float]) -> None:
    """Reject weights that are not positive numbers."""
    for field, weight in weights.items():
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise InvalidInput(f"Weight for {field!r} must be a number, got {weight!r}")
        if weight <= 0:
            raise InvalidInput(f"Weight for {field!r} must be positive, got {weight}")


def ranking_vector(
    columns: Sequence[str], weights: Mapping[str, float]
) -> list[float]:
    """Map a weight table onto the column order of the index.

    >>> ranking_vector(["title", "body", "id", "_type"], {"title": 3})
    [3, 1]

    Args:
        columns: Live column names in table order
        weights: Weight per field name

    Returns:
        One weight per indexed column, ``1`` where none is configured
    """
    validate_weights(weights)
    return [
        weights.get(column, DEFAULT_WEIGHT)
        for column in columns
        if column not in RESERVED_FIELDS
    ]
