"""Tests for `project.json` loading, stage overrides and language-model overrides."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from src.project.config import ProjectConfig, ProjectConfigError, load_project_config

WriteJson = Callable[[Path, Any], Path]


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    config = load_project_config(tmp_path / "project.json")

    assert config.models_directory == "models"
    assert config.build_directory == "platforms"
    assert config.dialogflow.resolve_generic_locales is True


def test_camel_case_keys(tmp_path: Path, write_json: WriteJson) -> None:
    path = write_json(
        tmp_path / "project.json",
        {
            "modelsDirectory": "lm",
            "endpoint": "https://example.com/webhook",
            "dialogflow": {"locales": {"en": ["en-US"]}, "resolveGenericLocales": False},
        },
    )

    config = load_project_config(path)

    assert config.models_directory == "lm"
    assert config.dialogflow.locales == {"en": ["en-US"]}
    assert config.dialogflow.resolve_generic_locales is False
    assert config.dialogflow_endpoint() == "https://example.com/webhook"


def test_invalid_json_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "project.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ProjectConfigError):
        load_project_config(path)


def test_invalid_shape_is_reported(tmp_path: Path, write_json: WriteJson) -> None:
    path = write_json(tmp_path / "project.json", {"dialogflow": {"locales": "en-US"}})

    with pytest.raises(ProjectConfigError):
        load_project_config(path)


def test_stage_overrides_replace_lists() -> None:
    config = ProjectConfig.model_validate(
        {
            "endpoint": "https://dev.example.com",
            "dialogflow": {"locales": {"en": ["en-US", "en-GB"]}},
            "stages": {
                "prod": {
                    "endpoint": "https://example.com",
                    "dialogflow": {"locales": {"en": ["en-US"]}},
                }
            },
        }
    )

    prod = config.for_stage("prod")

    assert prod.endpoint == "https://example.com"
    assert prod.dialogflow.locales == {"en": ["en-US"]}
    assert config.for_stage("unknown") is config
    assert config.for_stage(None) is config


def test_dialogflow_settings_take_precedence() -> None:
    config = ProjectConfig.model_validate(
        {
            "endpoint": "https://generic.example.com",
            "defaultLocale": "en",
            "dialogflow": {"endpoint": "https://df.example.com", "defaultLocale": "de"},
        }
    )

    assert config.dialogflow_endpoint() == "https://df.example.com"
    assert config.configured_default_locale() == "de"


def test_language_model_overrides_generic_first() -> None:
    config = ProjectConfig.model_validate(
        {
            "languageModel": {"en": {"invocation": "generic"}},
            "dialogflow": {"languageModel": {"en": {"invocation": "dialogflow"}}},
        }
    )

    assert config.language_model_overrides("en") == [
        {"invocation": "generic"},
        {"invocation": "dialogflow"},
    ]
    assert config.language_model_overrides("de") == []
