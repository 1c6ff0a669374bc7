"""Tests for the SQLite FTS5 storage engine."""

import pytest

from searchlite.backends.sqlite import SQLiteEngine, bm25_config, quote_identifier
from searchlite.exceptions import EngineExecutionError, IndexMutationError
from searchlite.models import TOKEN_CHARS, Column

COLUMNS = [
    Column("title"),
    Column("body"),
    Column("id", indexed=False),
    Column("_type", indexed=False),
]


@pytest.fixture
def engine(memory_engine):
    memory_engine.create_fulltext_table("models", COLUMNS, TOKEN_CHARS)
    memory_engine.insert(
        "models",
        {"id": "a", "_type": "page", "title": "Quantum physics", "body": "waves"},
    )
    memory_engine.insert(
        "models",
        {"id": "b", "_type": "page", "title": "Cooking", "body": "quantum soup"},
    )
    memory_engine.insert(
        "models", {"id": "c", "_type": "user", "title": "ann@example.com"}
    )
    return memory_engine


def ids(rows):
    return [row["id"] for row in rows]


class TestHelpers:
    """Test SQL rendering helpers."""

    def test_quote_identifier(self):
        assert quote_identifier("models") == '"models"'
        assert quote_identifier('we"ird') == '"we""ird"'

    def test_bm25_config(self):
        assert bm25_config([3, 1]) == "bm25(3, 1)"
        assert bm25_config([2.5, 1.0, 0.5]) == "bm25(2.5, 1, 0.5)"

    def test_bm25_config_without_exponents(self):
        assert bm25_config([1e-7, 1e20]) == "bm25(0.0000001, 100000000000000000000)"
        assert bm25_config([1e-05]) == "bm25(0.00001)"


class TestSQLiteEngine:
    """Test SQLiteEngine operations."""

    def test_describe_columns_in_table_order(self, engine):
        assert engine.describe_columns("models") == ["title", "body", "id", "_type"]

    def test_validate_table(self, engine):
        assert engine.validate_table("models") is True
        assert engine.validate_table("missing") is False

    def test_validate_table_requires_reserved_columns(self, memory_engine):
        memory_engine.create_fulltext_table("other", [Column("title")], TOKEN_CHARS)

        assert memory_engine.validate_table("other") is False

    def test_match_query_projects_columns(self, engine):
        rows = engine.match_query("models", "physics*", ["id", "_type"])

        assert rows == [{"id": "a", "_type": "page"}]

    def test_match_query_is_prefix_capable(self, engine):
        assert sorted(ids(engine.match_query("models", "quant*", ["id"]))) == ["a", "b"]

    def test_unindexed_columns_are_not_searchable(self, engine):
        assert engine.match_query("models", "page*", ["id"]) == []

    def test_token_characters_keep_words_together(self, engine):
        assert ids(engine.match_query("models", '"ann@example"*', ["id"])) == ["c"]
        assert engine.match_query("models", "example*", ["id"]) == []

    def test_ranking_weights_change_order(self, engine):
        title_first = engine.match_query(
            "models", "quantum*", ["id"], ranking_weights=[10, 1]
        )
        body_first = engine.match_query(
            "models", "quantum*", ["id"], ranking_weights=[1, 10]
        )

        assert ids(title_first) == ["a", "b"]
        assert ids(body_first) == ["b", "a"]

    def test_extreme_weights_are_accepted(self, engine):
        rows = engine.match_query(
            "models", "quantum*", ["id"], ranking_weights=[1e-5, 1e20]
        )

        assert sorted(ids(rows)) == ["a", "b"]

    def test_offset_and_limit(self, engine):
        everything = ids(engine.match_query("models", "quantum*", ["id"]))

        assert ids(engine.match_query("models", "quantum*", ["id"], limit=1)) == [
            everything[0]
        ]
        assert ids(
            engine.match_query("models", "quantum*", ["id"], offset=1, limit=1)
        ) == [everything[1]]

    def test_malformed_expression_raises(self, engine):
        with pytest.raises(EngineExecutionError):
            engine.match_query("models", "AND", ["id"])

    def test_query_on_missing_table_raises(self, memory_engine):
        with pytest.raises(EngineExecutionError):
            memory_engine.match_query("models", "x*", ["id"])

    def test_delete(self, engine):
        assert engine.delete("models", "a") == 1
        assert engine.delete("models", "a") == 0
        assert engine.match_query("models", "physics*", ["id"]) == []

    def test_insert_into_missing_table_raises(self, memory_engine):
        with pytest.raises(IndexMutationError):
            memory_engine.insert("models", {"id": "a"})

    def test_create_replaces_existing_table(self, engine):
        engine.create_fulltext_table(
            "models", [Column("name"), Column("id", indexed=False)], TOKEN_CHARS
        )

        assert engine.describe_columns("models") == ["name", "id"]
        assert engine.count("models") == 0

    def test_diacritics_are_folded(self, memory_engine):
        memory_engine.create_fulltext_table("models", COLUMNS, TOKEN_CHARS)
        memory_engine.insert("models", {"id": "m", "title": "Ann Müller"})

        assert ids(memory_engine.match_query("models", "muller*", ["id"])) == ["m"]
        assert ids(memory_engine.match_query("models", "Müller*", ["id"])) == ["m"]


class TestTransactions:
    """Test transaction handling."""

    def test_supports_transactions(self, memory_engine):
        assert memory_engine.supports_transactions() is True

    def test_rollback_on_error(self, engine):
        with pytest.raises(RuntimeError):
            with engine.transaction():
                engine.delete("models", "a")
                raise RuntimeError("boom")

        assert engine.count("models") == 3

    def test_commit_on_success(self, engine):
        with engine.transaction():
            engine.delete("models", "a")
            engine.delete("models", "b")

        assert engine.count("models") == 1

    def test_drop_and_create_roll_back(self, engine):
        with pytest.raises(RuntimeError):
            with engine.transaction():
                engine.create_fulltext_table("models", [Column("x")], TOKEN_CHARS)
                raise RuntimeError("boom")

        assert engine.describe_columns("models") == ["title", "body", "id", "_type"]
        assert engine.count("models") == 3

    def test_nested_transaction_keeps_outer_open(self, engine):
        with pytest.raises(RuntimeError):
            with engine.transaction():
                with engine.transaction():
                    engine.delete("models", "a")
                engine.delete("models", "b")
                assert engine.connection.in_transaction
                raise RuntimeError("boom")

        assert engine.count("models") == 3


class TestLifecycle:
    """Test opening and closing."""

    def test_file_database_persists(self, tmp_path):
        path = tmp_path / "index.sqlite"
        with SQLiteEngine(path) as engine:
            engine.create_fulltext_table("models", COLUMNS, TOKEN_CHARS)
            engine.insert("models", {"id": "a", "title": "persisted"})

        with SQLiteEngine(path) as engine:
            assert ids(engine.match_query("models", "persist*", ["id"])) == ["a"]

    def test_closed_engine_raises(self):
        engine = SQLiteEngine(":memory:")
        engine.close()

        with pytest.raises(RuntimeError):
            engine.connection
