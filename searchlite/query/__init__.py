"""Query processing for full-text search.

Turns free text into FTS5 match expressions:
- QueryTokenizer: strips punctuation and splits into tokens
- QueryCompiler: prefix wildcards, operator insertion and escaping
"""

from .compiler import OPERATORS, CompiledQuery, QueryCompiler, escape_term
from .tokenizer import QueryTokenizer

__all__ = [
    "OPERATORS",
    "CompiledQuery",
    "QueryCompiler",
    "QueryTokenizer",
    "escape_term",
]
