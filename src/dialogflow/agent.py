"""Dialogflow platform plugin.

Wires the transform core to the project collaborators: the model loader provides the neutral model
for a locale, the project config provides merge overrides and locale rules, and the project paths
locate the agent directory.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from src.dialogflow.context import BuildContext
from src.dialogflow.files import AgentFiles
from src.dialogflow.forward import BuildResult, build_language_model
from src.dialogflow.reverse import reverse_language_model
from src.dialogflow.schema import PLATFORM_ID
from src.model.merge import ArrayStrategy, merge_all
from src.model.schema import NeutralModel, model_from_obj
from src.project.config import ProjectConfig
from src.project.locales import default_locale, resolve_locales
from src.project.models import ModelFileError, ModelLoader
from src.project.paths import ProjectPaths

logger = logging.getLogger(__name__)


class DialogflowAgent:
    """Forward and reverse builds of a project's Dialogflow agent."""

    platform_id = PLATFORM_ID

    def __init__(self, paths: ProjectPaths, loader: ModelLoader | None = None) -> None:
        self.paths = paths
        self.loader = loader or ModelLoader(paths.models_dir)
        self.files = AgentFiles(paths.platform_dir(PLATFORM_ID))

    def _config(self, stage: str | None) -> ProjectConfig:
        return self.paths.config.for_stage(stage)

    def get_model(self, locale: str, stage: str | None = None) -> NeutralModel:
        """Load the `locale` model with the config's language-model overrides merged on top."""

        model = self.loader.get_model(locale)
        overrides = self._config(stage).language_model_overrides(locale)
        if not overrides:
            return model
        merged = merge_all(model.to_json_obj(), *overrides, arrays=ArrayStrategy.concat)
        try:
            return model_from_obj(merged)
        except ValidationError as exc:
            raise ModelFileError(
                f"Language model {locale} is invalid after applying project overrides: {exc}"
            ) from exc

    def output_locales(self, locale: str, stage: str | None = None) -> list[str]:
        dialogflow = self._config(stage).dialogflow
        return resolve_locales(
            locale,
            dialogflow.locales,
            prefix_fallback=dialogflow.resolve_generic_locales,
        )

    def forward_build(self, locale: str, stage: str | None = None) -> BuildResult | None:
        """Build agent files for `locale` and each locale it resolves to.

        Returns `None` (and logs a warning) when the project has no model for `locale`.
        """

        if not self.loader.has_model(locale):
            logger.warning("skipping locale=%s reason=no model file", locale)
            return None

        model = self.get_model(locale, stage)
        result = BuildResult()
        for output_locale in self.output_locales(locale, stage):
            ctx = BuildContext(locale=output_locale, files=self.files, stage=stage)
            built = build_language_model(model, ctx)
            for kind in ("intents", "user_says", "entities", "entries"):
                paths = getattr(result, kind)
                paths.extend(p for p in getattr(built, kind) if p not in paths)
        return result

    def write_agent(self, locales: Sequence[str], stage: str | None = None) -> None:
        """Write `agent.json` (languages, webhook) and `package.json`."""

        config = self._config(stage)
        resolved: list[str] = []
        for locale in locales:
            for output_locale in self.output_locales(locale, stage):
                if output_locale.lower() not in resolved:
                    resolved.append(output_locale.lower())

        language = default_locale(resolved, config.configured_default_locale()).lower()
        agent: dict[str, Any] = {
            "language": language,
            "supportedLanguages": [lang for lang in resolved if lang != language],
        }
        endpoint = config.dialogflow_endpoint()
        if endpoint:
            agent["webhook"] = {"url": endpoint, "available": True}

        previous = self.files.read_agent() or {}
        self.files.write_agent({**previous, **agent})
        logger.info("wrote agent language=%s supported=%s", language, agent["supportedLanguages"])

    def build(self, locales: Sequence[str], stage: str | None = None) -> list[BuildResult]:
        """Forward-build every locale, then write the agent descriptor."""

        status = "updating" if self.files.exists() else "creating"
        logger.info("%s dialogflow agent path=%s stage=%s", status, self.files.root, stage)

        results: list[BuildResult] = []
        for locale in locales:
            result = self.forward_build(locale, stage)
            if result is not None:
                results.append(result)
        if results:
            self.write_agent(locales, stage)
        return results

    def reverse_build(self, locale: str) -> NeutralModel:
        return reverse_language_model(BuildContext(locale=locale, files=self.files))

    def reverse_locales(self, stage: str | None = None) -> list[str]:
        """Model locales to rebuild from the agent directory.

        Locales are taken from the companion files, else from `agent.json`. A file locale that
        matches an existing model file (case-insensitively) maps back to that model's locale. File
        locales that a forward build only derives from an existing model (its generic prefix or
        mapped locales) are skipped.
        """

        detected = self.files.detect_locales()
        if not detected:
            agent = self.files.read_agent() or {}
            language = agent.get("language")
            detected = [str(language).lower()] if language else []

        model_locales = {locale.lower(): locale for locale in self.loader.locales()}
        derived = {
            output_locale.lower()
            for locale in model_locales.values()
            for output_locale in self.output_locales(locale, stage)
        }

        locales: list[str] = []
        for file_locale in detected:
            if file_locale in model_locales:
                locales.append(model_locales[file_locale])
            elif file_locale in derived:
                logger.debug("skipping derived locale=%s", file_locale)
            else:
                locales.append(file_locale)
        return locales

    def clean(self) -> None:
        self.files.clean()
