"""
Shared test fixtures and configuration for filerepo tests.
"""
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from filerepo import create_app
from filerepo.config import TestConfig
from filerepo.storage.collection import Collection
from filerepo.storage.registry import CollectionRegistry


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Create a temporary data directory for collection files."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def app(temp_data_dir: Path) -> Flask:
    """Create a test Flask application bound to a temporary data directory."""

    class _Config(TestConfig):
        DATA_DIR = temp_data_dir

    app = create_app(_Config)
    yield app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a Flask test client."""
    return app.test_client()


@pytest.fixture
def registry(temp_data_dir: Path) -> CollectionRegistry:
    """Create a CollectionRegistry rooted at the temporary directory."""
    return CollectionRegistry(temp_data_dir, lock_timeout=5.0)


@pytest.fixture
def widgets(registry: CollectionRegistry) -> Collection:
    """The 'widgets' collection, empty."""
    return registry.collection("widgets")
