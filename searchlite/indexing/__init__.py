"""Index construction: schema derivation, fuzzy expansion, replacement."""

from .builder import IndexBuilder, prepare_record
from .fuzzy import WORD_PATTERN, FuzzyExpander, expand_value
from .schema import derive_schema

__all__ = [
    "WORD_PATTERN",
    "FuzzyExpander",
    "IndexBuilder",
    "derive_schema",
    "expand_value",
    "prepare_record",
]
