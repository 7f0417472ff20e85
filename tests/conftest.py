"""Shared test fixtures for the Maestro test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from maestro.composers import ComposerProfile
from maestro.conversation import ActiveSessionSet, ConversationRepository
from maestro.storage import InMemoryBlobStore
from tests.factories import ComposerFactory


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "[sessions]\ncapacity = 3",
                "development.toml": "[storage]\nbackend = 'inmemory'",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"MAESTRO_DEBUG": "true"}):
                ...
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from maestro.config import get_settings
    from maestro.config.settings import Settings

    get_settings.cache_clear()
    Settings.use_toml_layers({})
    yield
    get_settings.cache_clear()
    Settings.use_toml_layers({})


@pytest.fixture
def store() -> InMemoryBlobStore:
    """Fresh in-memory durable store."""
    return InMemoryBlobStore()


@pytest.fixture
def repository(store: InMemoryBlobStore) -> ConversationRepository:
    return ConversationRepository(store)


@pytest.fixture
def active_sessions(store: InMemoryBlobStore) -> ActiveSessionSet:
    return ActiveSessionSet(store, capacity=5)


@pytest.fixture
def bach() -> ComposerProfile:
    return ComposerFactory.bach()


@pytest.fixture
def vivaldi() -> ComposerProfile:
    return ComposerFactory.vivaldi()
