"""Storage engines for the full-text index.

- **StorageEngine**: abstract interface the provider depends on
- **SQLiteEngine**: FTS5 virtual tables with BM25 ranking
"""

from .base import StorageEngine
from .sqlite import SQLiteEngine

__all__ = [
    "SQLiteEngine",
    "StorageEngine",
]
