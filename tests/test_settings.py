"""Tests for environment settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.config.settings import load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("PROJECT_DIR", "PROJECT_CONFIG", "STAGE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    settings = load_settings()

    assert settings.project_dir == "."
    assert settings.project_config == "project.json"
    assert settings.stage is None
    assert settings.log_level == "INFO"


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STAGE", "prod")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.stage == "prod"
    assert settings.log_level == "DEBUG"


def test_values_from_dotenv_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("PROJECT_CONFIG=app.json\nSTAGE=\n", encoding="utf-8")

    settings = load_settings()

    assert settings.project_config == "app.json"
    assert settings.stage is None


def test_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(RuntimeError):
        load_settings()
