"""Tests for provider configuration."""

from pathlib import Path

import pytest

from searchlite.config import ProviderConfig, default_index_file, load_config
from searchlite.exceptions import ConfigurationError


class TestProviderConfig:
    """Test ProviderConfig construction and validation."""

    def test_defaults(self):
        config = ProviderConfig()

        assert config.file is None
        assert config.fuzzy is True
        assert config.operator == "OR"
        assert config.weights is None
        assert config.relation == "models"

    def test_invalid_operator(self):
        with pytest.raises(ConfigurationError, match="operator"):
            ProviderConfig(operator="XOR")

    @pytest.mark.parametrize("weights", [{"title": 0}, {"title": -2}, {"title": "3"}])
    def test_invalid_weights(self, weights):
        with pytest.raises(ConfigurationError, match="weights"):
            ProviderConfig(weights=weights)

    @pytest.mark.parametrize(
        "weights, message",
        [
            ({"title": True}, "must be a number"),
            ({"title": 0.0}, "must be positive"),
        ],
    )
    def test_weights_checked_like_search_weights(self, weights, message):
        with pytest.raises(ConfigurationError, match=message) as excinfo:
            ProviderConfig(weights=weights)

        assert excinfo.value.option == "weights"

    def test_valid_weights(self):
        config = ProviderConfig(weights={"title": 3, "body": 0.5})

        assert config.weights == {"title": 3, "body": 0.5}

    def test_invalid_relation(self):
        with pytest.raises(ConfigurationError, match="relation"):
            ProviderConfig(relation="drop table; --")

    def test_invalid_fuzzy(self):
        with pytest.raises(ConfigurationError, match="fuzzy"):
            ProviderConfig(fuzzy="yes")

    def test_from_mapping(self):
        config = ProviderConfig.from_mapping(
            {
                "file": "/tmp/index.sqlite",
                "fuzzy": {"page": ["title", "text"]},
                "operator": "AND",
                "weights": {"title": 3},
            }
        )

        assert config.fuzzy == {"page": ["title", "text"]}
        assert config.operator == "AND"
        assert config.weights == {"title": 3.0}

    def test_from_mapping_type_errors(self):
        with pytest.raises(ConfigurationError):
            ProviderConfig.from_mapping({"fuzzy": "sometimes"})

    def test_from_mapping_unknown_operator(self):
        with pytest.raises(ConfigurationError):
            ProviderConfig.from_mapping({"operator": "maybe"})

    def test_from_file(self, tmp_path):
        path = tmp_path / "search.yaml"
        path.write_text("operator: AND\nfuzzy: false\nweights:\n  title: 2\n")

        config = ProviderConfig.from_file(path)

        assert config.operator == "AND"
        assert config.fuzzy is False
        assert config.weights == {"title": 2.0}

    def test_from_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("operator: [AND\n")

        with pytest.raises(ConfigurationError, match="invalid YAML"):
            ProviderConfig.from_file(path)

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="cannot read"):
            ProviderConfig.from_file(tmp_path / "missing.yaml")

    def test_merged(self):
        config = ProviderConfig().merged(operator="AND")

        assert config.operator == "AND"
        assert config.fuzzy is True


class TestResolveFile:
    """Test index location resolution."""

    def test_string_path(self):
        assert ProviderConfig(file="/data/index.sqlite").resolve_file() == (
            "/data/index.sqlite"
        )

    def test_path_object(self, tmp_path):
        assert ProviderConfig(file=tmp_path / "x.sqlite").resolve_file() == str(
            tmp_path / "x.sqlite"
        )

    def test_callable(self):
        config = ProviderConfig(file=lambda: "/data/from-callable.sqlite")

        assert config.resolve_file() == "/data/from-callable.sqlite"

    def test_memory(self):
        assert ProviderConfig(file=":memory:").resolve_file() == ":memory:"

    def test_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SEARCHLITE_DATA_DIR", str(tmp_path))

        assert ProviderConfig().resolve_file() == str(
            tmp_path / "search" / "index.sqlite"
        )

    @pytest.mark.parametrize("location", ["", "   ", 42])
    def test_invalid_locations(self, location):
        with pytest.raises(ConfigurationError, match="file"):
            ProviderConfig(file=location).resolve_file()

    def test_callable_returning_nothing_uses_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SEARCHLITE_DATA_DIR", str(tmp_path))

        config = ProviderConfig(file=lambda: None)

        assert config.resolve_file() == str(default_index_file())


class TestDefaultIndexFile:
    """Test default_index_file function."""

    def test_data_dir_variable(self, monkeypatch):
        monkeypatch.setenv("SEARCHLITE_DATA_DIR", "/srv/search")

        assert default_index_file() == Path("/srv/search/search/index.sqlite")

    def test_xdg_data_home(self, monkeypatch):
        monkeypatch.setenv("XDG_DATA_HOME", "/xdg")

        assert default_index_file() == Path("/xdg/searchlite/search/index.sqlite")


class TestLoadConfig:
    """Test layered configuration loading."""

    def test_without_sources(self):
        assert load_config() == ProviderConfig()

    def test_search_section(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("theme: dark\nsearch:\n  operator: AND\n  relation: docs\n")

        config = load_config(path)

        assert config.operator == "AND"
        assert config.relation == "docs"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "search.yaml"
        path.write_text("operator: AND\nfile: /from/file.sqlite\n")
        monkeypatch.setenv("SEARCHLITE_INDEX_FILE", "/from/env.sqlite")
        monkeypatch.setenv("SEARCHLITE_OPERATOR", "not")

        config = load_config(path)

        assert config.file == "/from/env.sqlite"
        assert config.operator == "NOT"

    def test_keyword_overrides_win(self, monkeypatch):
        monkeypatch.setenv("SEARCHLITE_INDEX_FILE", "/from/env.sqlite")

        config = load_config(file="/from/kwargs.sqlite", operator=None)

        assert config.file == "/from/kwargs.sqlite"
        assert config.operator == "OR"

    def test_nested_values_merge(self, tmp_path):
        path = tmp_path / "search.yaml"
        path.write_text("weights:\n  title: 3\n")

        config = load_config(path, weights={"text": 2})

        assert config.weights == {"title": 3.0, "text": 2.0}

    def test_callable_file_override(self):
        config = load_config(file=lambda: ":memory:")

        assert config.resolve_file() == ":memory:"

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(path)
