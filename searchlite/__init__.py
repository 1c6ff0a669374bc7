"""Full-text search provider backed by SQLite FTS5.

Maps heterogeneous records into an FTS5 virtual table and answers ranked,
paginated queries against it.

Main components:
- SqliteProvider: public provider surface (replace, insert, delete, search)
- IndexBuilder: schema derivation and full index replacement
- FuzzyExpander: suffix expansion for substring matches
- QueryTokenizer / QueryCompiler: free text to FTS5 match expressions
- SearchExecutor: paginated, ranked, fail-soft query execution
"""

from .config import ProviderConfig, load_config
from .exceptions import (
    ConfigurationError,
    EngineExecutionError,
    IndexMutationError,
    InvalidInput,
    QueryCompilationError,
    SchemaDerivationError,
    SearchliteError,
)
from .models import ID_FIELD, TYPE_FIELD, ResultEnvelope, SearchOptions
from .provider import Provider, SqliteProvider

__all__ = [
    "ID_FIELD",
    "TYPE_FIELD",
    "ConfigurationError",
    "EngineExecutionError",
    "IndexMutationError",
    "InvalidInput",
    "Provider",
    "ProviderConfig",
    "QueryCompilationError",
    "ResultEnvelope",
    "SchemaDerivationError",
    "SearchOptions",
    "SearchliteError",
    "SqliteProvider",
    "load_config",
]

__version__ = "1.0.0"
