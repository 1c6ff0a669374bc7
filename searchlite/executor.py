"""Search execution against the full-text relation."""

import logging
from collections.abc import Mapping

from .backends.base import StorageEngine
from .exceptions import EngineExecutionError, QueryCompilationError
from .models import ID_FIELD, TYPE_FIELD, BooleanOperator, ResultEnvelope, SearchOptions
from .query import QueryCompiler, QueryTokenizer
from .ranking import ranking_vector

logger = logging.getLogger(__name__)

PROJECTED_COLUMNS = (ID_FIELD, TYPE_FIELD)


class SearchExecutor:
    """Runs ranked, paginated searches.

    Searching never raises for bad queries or engine failures: both yield
    an empty envelope. Invalid options are still reported to the caller.
    """

    def __init__(
        self,
        engine: StorageEngine,
        relation: str = "models",
        operator: BooleanOperator | str = BooleanOperator.OR,
        weights: Mapping[str, float] | None = None,
        tokenizer: QueryTokenizer | None = None,
        compiler: QueryCompiler | None = None,
    ):
        self.engine = engine
        self.relation = relation
        self.weights = weights
        self.tokenizer = tokenizer or QueryTokenizer()
        self.compiler = compiler or QueryCompiler(operator)

    def search(self, query: str, options: SearchOptions | None = None) -> ResultEnvelope:
        """Execute a search query.

        Args:
            query: Raw user query
            options: Pagination and overrides for operator and weights

        Returns:
            Envelope with ``id`` and ``_type`` of each hit, best match first
        """
        options = options or SearchOptions()
        weights = options.weights if options.weights is not None else self.weights

        try:
            compiled = self.compiler.compile(
                self.tokenizer.tokenize(query), options.operator
            )
        except QueryCompilationError as e:
            logger.debug(f"Returning no results: {e}")
            return ResultEnvelope.empty(options.page, options.limit)

        if compiled.is_empty:
            return ResultEnvelope.empty(options.page, options.limit)

        try:
            ranking = None
            if weights is not None:
                ranking = ranking_vector(
                    self.engine.describe_columns(self.relation), weights
                )

            rows = self.engine.match_query(
                self.relation,
                compiled.expression,
                PROJECTED_COLUMNS,
                ranking_weights=ranking,
                offset=options.offset,
                limit=options.limit,
            )
        except EngineExecutionError as e:
            logger.warning(f"Search for {query!r} failed, returning no results: {e}")
            return ResultEnvelope.empty(options.page, options.limit)

        hits = [{ID_FIELD: row[ID_FIELD], TYPE_FIELD: row[TYPE_FIELD]} for row in rows]
        return ResultEnvelope(
            hits=hits, page=options.page, total=len(hits), limit=options.limit
        )
