"""Pytest configuration and fixtures."""

import os

import pytest

from searchlite.backends.sqlite import SQLiteEngine
from searchlite.config import ProviderConfig
from searchlite.provider import SqliteProvider


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Isolate environment variables for each test.

    This prevents test pollution where one test's environment
    changes affect other tests.
    """
    original_env = os.environ.copy()

    for name in list(os.environ):
        if name.startswith("SEARCHLITE_"):
            monkeypatch.delenv(name)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def sample_documents() -> list[dict]:
    """Documents of several types with differing field sets."""
    return [
        {
            "id": "pages/home",
            "_type": "page",
            "title": "Welcome home",
            "text": "The cat sat on the mat",
        },
        {
            "id": "pages/about",
            "_type": "page",
            "title": "About us",
            "text": "We build trees and houses",
        },
        {
            "id": "users/ann",
            "_type": "user",
            "email": "ann@example.com",
            "name": "Ann Müller",
        },
        {
            "id": "files/report",
            "_type": "file",
            "filename": "annual-report.pdf",
            "title": "Annual report",
        },
    ]


@pytest.fixture
def memory_engine():
    """SQLite engine on an in-memory database."""
    engine = SQLiteEngine(":memory:")
    yield engine
    engine.close()


@pytest.fixture
def provider():
    """Provider with default options on an in-memory database."""
    with SqliteProvider(ProviderConfig(file=":memory:")) as provider:
        yield provider


@pytest.fixture
def populated_provider(provider, sample_documents):
    """Provider with the sample documents indexed."""
    provider.replace(sample_documents)
    return provider
