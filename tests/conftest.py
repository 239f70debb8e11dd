"""Shared pytest fixtures."""

from pathlib import Path

import pytest

from hexmate.config import Settings
from hexmate.core.session import Session


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default settings file into the test's temporary directory."""
    path = tmp_path / "config" / "settings.yaml"
    monkeypatch.setenv("HEXMATE_CONFIG", str(path))
    return path


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def session(settings: Settings, isolated_config: Path) -> Session:
    return Session(settings, isolated_config)
