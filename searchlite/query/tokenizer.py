"""Query tokenizer."""

import re

from ..exceptions import InvalidInput
from ..indexing.fuzzy import WORD_PATTERN

# Anything outside this set could be read as match syntax by the engine
STRIP_PATTERN = re.compile(r"[^a-z0-9äöüÄÖÜß]+", re.IGNORECASE)


class QueryTokenizer:
    """Splits raw query strings into search tokens."""

    def clean(self, query: str) -> str:
        """Replace runs of unsupported characters with a single space."""
        return STRIP_PATTERN.sub(" ", query)

    def tokenize(self, query: str) -> list[str]:
        """Tokenize a query string.

        Args:
            query: Raw user query

        Returns:
            Tokens in query order, duplicates preserved
        """
        if not isinstance(query, str):
            raise InvalidInput(f"Query must be a string, got {type(query).__name__}")

        return WORD_PATTERN.findall(self.clean(query))
