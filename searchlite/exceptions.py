"""Exception classes for searchlite."""


class SearchliteError(Exception):
    """Base exception for search provider errors."""

    pass


class InvalidInput(SearchliteError, ValueError):
    """Raised when a caller passes arguments that violate a precondition."""

    pass


class ConfigurationError(SearchliteError):
    """Raised when provider configuration is invalid or incomplete."""

    def __init__(self, option: str, message: str):
        """Initialize with option name and message."""
        self.option = option
        super().__init__(f"Invalid configuration for {option}: {message}")


class SchemaDerivationError(InvalidInput):
    """Raised when no schema can be derived from a document batch."""

    pass


class QueryCompilationError(SearchliteError):
    """Raised when a query cannot be compiled into a match expression."""

    def __init__(self, query: str, message: str):
        """Initialize with raw query and message."""
        self.query = query
        super().__init__(f"Cannot compile query {query!r}: {message}")


class EngineExecutionError(SearchliteError):
    """Raised when the storage engine fails to execute a statement."""

    pass


class IndexMutationError(EngineExecutionError):
    """Raised when replacing, inserting into or deleting from the index fails."""

    pass
