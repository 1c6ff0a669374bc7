"""Suffix expansion of field values.

The FTS5 index only matches token prefixes. Storing every suffix of every
word next to the original value lets a prefix query like ``ell*`` find
``hello``, at the cost of a larger index: a word of length n contributes n
tokens instead of one.
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from ..models import RESERVED_FIELDS, TOKEN_CHARS, TYPE_FIELD, Document

WORD_PATTERN = re.compile(r"[\w" + re.escape(TOKEN_CHARS) + r"]+")

FuzzyPolicy = bool | Mapping[str, Sequence[str]]


def expand_value(value: str) -> str:
    """Append every trailing suffix of every word to a value.

    >>> expand_value("tree")
    'tree ree ee e'

    Always expand the source value; expanding an already expanded value
    produces a different result.
    """
    parts = [value]

    for word in WORD_PATTERN.findall(value):
        while word:
            word = word[1:]
            if word:
                parts.append(word)

    return " ".join(parts)


class FuzzyExpander:
    """Applies suffix expansion to documents according to a field policy."""

    def __init__(self, policy: FuzzyPolicy = True):
        """Initialize expander.

        Args:
            policy: ``True`` expands every field, ``False`` none, a mapping
                of document type to field names expands only those fields
        """
        self.policy = policy

    @property
    def enabled(self) -> bool:
        return self.policy is not False

    def should_expand(self, field: str, document_type: Any) -> bool:
        """Check whether a field of a given document type gets expanded."""
        if field in RESERVED_FIELDS or not self.enabled:
            return False
        if self.policy is True:
            return True
        return field in self.policy.get(document_type, ())

    def expand(self, document: Document) -> dict[str, Any]:
        """Return a copy of the document with selected fields expanded."""
        expanded = dict(document)
        if not self.enabled:
            return expanded

        document_type = document.get(TYPE_FIELD)
        for field, value in document.items():
            if not isinstance(value, str):
                continue
            if self.should_expand(field, document_type):
                expanded[field] = expand_value(value)

        return expanded

    def __repr__(self) -> str:
        return f"FuzzyExpander(policy={self.policy!r})"
