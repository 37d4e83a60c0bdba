"""Neutral model files (`<modelsDirectory>/<locale>.json`)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from src.model.schema import NeutralModel, model_from_obj

logger = logging.getLogger(__name__)


class ModelNotFoundError(FileNotFoundError):
    """Raised when no model file exists for a locale."""


class ModelFileError(ValueError):
    """Raised when a model file is not valid JSON or does not match the neutral schema."""


class ModelExistsError(FileExistsError):
    """Raised when saving would overwrite an existing model file."""


class ModelLoader:
    """Loads and saves the neutral model files of a project."""

    def __init__(self, models_dir: Path) -> None:
        self.models_dir = models_dir

    def path_for(self, locale: str) -> Path:
        return self.models_dir / f"{locale}.json"

    def locales(self) -> list[str]:
        """Locales that have a model file, sorted."""

        if not self.models_dir.is_dir():
            return []
        return sorted(p.stem for p in self.models_dir.glob("*.json") if p.is_file())

    def has_model(self, locale: str) -> bool:
        return self.path_for(locale).is_file()

    def get_model(self, locale: str) -> NeutralModel:
        path = self.path_for(locale)
        if not path.is_file():
            raise ModelNotFoundError(f"No language model for locale {locale} at {path}")

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ModelFileError(f"Model file {path} is not valid JSON: {exc}") from exc

        try:
            return model_from_obj(payload)
        except ValidationError as exc:
            raise ModelFileError(f"Invalid language model {path}: {exc}") from exc

    def save_model(self, locale: str, model: NeutralModel, *, overwrite: bool = False) -> Path:
        """Write `model` as `<locale>.json`.

        Raises:
            ModelExistsError: If the file exists and `overwrite` is false.
        """

        path = self.path_for(locale)
        if path.exists() and not overwrite:
            raise ModelExistsError(f"Model file {path} already exists (use --force to overwrite)")

        self.models_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(model.to_json_obj(), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        logger.info("saved model locale=%s path=%s", locale, path)
        return path
