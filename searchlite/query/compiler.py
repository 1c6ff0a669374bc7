"""Compilation of query tokens into FTS5 match expressions."""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..exceptions import QueryCompilationError
from ..models import BooleanOperator

logger = logging.getLogger(__name__)

OPERATORS = frozenset(operator.value for operator in BooleanOperator)

# Characters FTS5 accepts in an unquoted term
BAREWORD_PATTERN = re.compile(r"(?:[A-Za-z0-9_\x1a]|[^\x00-\x7f])+")


def escape_term(term: str) -> str:
    """Make a term safe to embed in a match expression.

    Barewords are returned unchanged, anything else becomes an FTS5 string
    with embedded double quotes doubled.
    """
    if BAREWORD_PATTERN.fullmatch(term):
        return term
    return '"' + term.replace('"', '""') + '"'


@dataclass(frozen=True)
class CompiledQuery:
    """A match expression ready for execution."""

    tokens: tuple[str, ...]
    expression: str
    qualified: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.expression

    def __str__(self) -> str:
        return self.expression


class QueryCompiler:
    """Compiles token sequences into boolean prefix queries.

    Every term gets a trailing ``*`` so partial words match. Queries that
    already contain ``AND``, ``OR`` or ``NOT`` keep their own structure;
    other queries get the default operator between every pair of terms.
    """

    def __init__(self, operator: BooleanOperator | str = BooleanOperator.OR):
        self.operator = BooleanOperator.parse(operator)

    @staticmethod
    def is_qualified(tokens: Sequence[str]) -> bool:
        """Check whether tokens already contain boolean operators."""
        return any(token in OPERATORS for token in tokens)

    def compile(
        self,
        tokens: Sequence[str],
        operator: BooleanOperator | str | None = None,
    ) -> CompiledQuery:
        """Compile tokens into a match expression.

        Args:
            tokens: Output of the query tokenizer
            operator: Override for the default operator

        Returns:
            Compiled query, with an empty expression for empty input

        Raises:
            QueryCompilationError: If the tokens contain operators only
        """
        tokens = tuple(tokens)
        if not tokens:
            return CompiledQuery(tokens=(), expression="")

        operator = BooleanOperator.parse(operator or self.operator)
        qualified = self.is_qualified(tokens)

        if all(token in OPERATORS for token in tokens):
            raise QueryCompilationError(" ".join(tokens), "no search terms")

        terms = [
            token if token in OPERATORS else escape_term(token) + "*"
            for token in tokens
        ]
        separator = " " if qualified else f" {operator.value} "
        expression = separator.join(terms)

        logger.debug(f"Compiled {list(tokens)} into {expression!r}")
        return CompiledQuery(tokens=tokens, expression=expression, qualified=qualified)
