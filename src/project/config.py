"""Project configuration (`project.json`).

The project config supplies directory names, locale resolution rules and language-model overrides
that are merged on top of the model files before a build:

    {
      "languageModel": {"en": {...partial neutral model...}},
      "dialogflow": {
        "languageModel": {"en": {...}},
        "locales": {"en": ["en-US", "en-GB"]},
        "defaultLocale": "en"
      },
      "stages": {"prod": {...partial project config...}}
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from src.model.merge import ArrayStrategy, deep_merge

PartialModel = dict[str, Any]


class ProjectConfigError(ValueError):
    """Raised when the project config file cannot be read or is invalid."""


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class DialogflowConfig(_ConfigModel):
    """Dialogflow platform section of the project config."""

    language_model: dict[str, PartialModel] = Field(default_factory=dict)
    locales: dict[str, list[str]] = Field(default_factory=dict)
    default_locale: str | None = None
    endpoint: str | None = None
    # Whether `en-US` also builds the generic `en` locale when no explicit mapping exists.
    resolve_generic_locales: bool = True


class ProjectConfig(_ConfigModel):
    models_directory: str = "models"
    build_directory: str = "platforms"
    endpoint: str | None = None
    default_locale: str | None = None
    language_model: dict[str, PartialModel] = Field(default_factory=dict)
    dialogflow: DialogflowConfig = Field(default_factory=DialogflowConfig)
    stages: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def for_stage(self, stage: str | None) -> ProjectConfig:
        """Return the config with the stage's overrides applied (lists are replaced)."""

        if not stage or stage not in self.stages:
            return self

        base = self.model_dump(by_alias=True, exclude={"stages"})
        merged = deep_merge(base, self.stages[stage], arrays=ArrayStrategy.overwrite)
        merged["stages"] = self.stages
        return ProjectConfig.model_validate(merged)

    def language_model_overrides(self, locale: str) -> list[PartialModel]:
        """Partial models to merge onto the `locale` model, generic block first."""

        overrides: list[PartialModel] = []
        for block in (self.language_model.get(locale), self.dialogflow.language_model.get(locale)):
            if block:
                overrides.append(block)
        return overrides

    def dialogflow_endpoint(self) -> str | None:
        return self.dialogflow.endpoint or self.endpoint

    def configured_default_locale(self) -> str | None:
        return self.dialogflow.default_locale or self.default_locale


def load_project_config(path: Path) -> ProjectConfig:
    """Load `project.json`; a missing file yields the default config.

    Raises:
        ProjectConfigError: If the file exists but is unreadable or invalid.
    """

    if not path.is_file():
        return ProjectConfig()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ProjectConfigError(f"Cannot read project config {path}: {exc}") from exc

    try:
        return ProjectConfig.model_validate(payload)
    except ValidationError as exc:
        raise ProjectConfigError(f"Invalid project config {path}: {exc}") from exc
