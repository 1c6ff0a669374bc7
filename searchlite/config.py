"""Provider configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import msgspec
import yaml
from msgspec import structs

from .exceptions import ConfigurationError, InvalidInput
from .models import BooleanOperator
from .ranking import validate_weights

MEMORY_FILE = ":memory:"


def default_index_file() -> Path:
    """Get the default location of the index database."""
    if env_dir := os.environ.get("SEARCHLITE_DATA_DIR"):
        data_dir = Path(env_dir)
    else:
        xdg_data_home = Path(
            os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        )
        data_dir = xdg_data_home / "searchlite"
    return data_dir / "search" / "index.sqlite"


class ProviderConfig(msgspec.Struct, frozen=True, kw_only=True):
    """Configuration for the SQLite search provider.

    Attributes:
        file: Index database path, or a zero-argument callable returning one.
            ``None`` selects :func:`default_index_file`.
        fuzzy: ``True`` to expand every field, ``False`` to disable
            expansion, or a mapping of document type to expanded fields.
        operator: Operator inserted between unqualified query tokens.
        weights: Optional per-field ranking weights.
        relation: Name of the FTS5 table.
    """

    file: Any = None
    fuzzy: bool | dict[str, list[str]] = True
    operator: str = "OR"
    weights: dict[str, float] | None = None
    relation: str = "models"

    def __post_init__(self):
        try:
            BooleanOperator.parse(self.operator)
        except InvalidInput as e:
            raise ConfigurationError("operator", str(e))

        if not isinstance(self.fuzzy, (bool, dict)):
            raise ConfigurationError(
                "fuzzy", "expected a boolean or a mapping of type to fields"
            )

        if self.weights is not None:
            try:
                validate_weights(self.weights)
            except InvalidInput as e:
                raise ConfigurationError("weights", str(e))

        if not self.relation or not self.relation.isidentifier():
            raise ConfigurationError(
                "relation", f"{self.relation!r} is not a valid table name"
            )

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ProviderConfig:
        """Build a configuration from a plain dictionary."""
        try:
            return msgspec.convert(data, type=cls)
        except msgspec.ValidationError as e:
            raise ConfigurationError("provider", str(e)) from e

    @classmethod
    def from_file(cls, path: Path) -> ProviderConfig:
        """Load configuration from a YAML file."""
        return cls.from_mapping(_read_yaml(Path(path)))

    def resolve_file(self) -> str:
        """Resolve the index location to a path string.

        Callables are invoked exactly once per call.
        """
        location: Any = self.file
        if callable(location):
            location = location()
        if location is None:
            location = default_index_file()

        if isinstance(location, Path):
            location = str(location)
        if not isinstance(location, str) or not location.strip():
            raise ConfigurationError("file", f"{location!r} is not a valid path")
        return location

    def merged(self, **overrides: Any) -> ProviderConfig:
        """Return a copy with the given options replaced."""
        return type(self)(**{**structs.asdict(self), **overrides})


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError("file", f"invalid YAML in {path}: {e}")
    except OSError as e:
        raise ConfigurationError("file", f"cannot read {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError("file", f"{path} does not contain a mapping")
    return data


def load_config(path: Path | None = None, **overrides: Any) -> ProviderConfig:
    """Load configuration from a file, the environment and keyword overrides.

    Precedence, lowest first: YAML file, environment variables
    (``SEARCHLITE_INDEX_FILE``, ``SEARCHLITE_OPERATOR``), keyword overrides.
    A ``search`` section in the file is used when present.
    """
    config: dict[str, Any] = {}
    if path is not None:
        data = _read_yaml(Path(path))
        section = data.get("search", data)
        if not isinstance(section, dict):
            raise ConfigurationError("search", "section must be a mapping")
        config = _deep_merge(config, section)

    env_overrides: dict[str, Any] = {}
    if index_file := os.environ.get("SEARCHLITE_INDEX_FILE"):
        env_overrides["file"] = index_file
    if operator := os.environ.get("SEARCHLITE_OPERATOR"):
        env_overrides["operator"] = operator.upper()
    config = _deep_merge(config, env_overrides)

    config = _deep_merge(
        config, {key: value for key, value in overrides.items() if value is not None}
    )

    if callable(config.get("file")):
        file_option = config.pop("file")
        return ProviderConfig.from_mapping(config).merged(file=file_option)
    return ProviderConfig.from_mapping(config)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
