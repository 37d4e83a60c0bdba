"""Tests for the neutral model schema and the model file loader."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from src.model.schema import NeutralModel, model_from_obj
from src.project.models import (
    ModelExistsError,
    ModelFileError,
    ModelLoader,
    ModelNotFoundError,
)

WriteJson = Callable[[Path, Any], Path]
ReadJson = Callable[[Path], Any]


def test_duplicate_intent_names_are_rejected() -> None:
    with pytest.raises(ValidationError):
        model_from_obj({"intents": [{"name": "A"}, {"name": "A"}]})


def test_other_platform_blocks_survive_round_trip() -> None:
    obj = {
        "invocation": {"alexa": "my skill", "dialogflow": "my agent"},
        "intents": [{"name": "A", "phrases": ["hi"], "alexa": {"slots": []}}],
        "alexa": {"interactionModel": {}},
    }

    model = model_from_obj(obj)

    assert model.to_json_obj() == obj
    assert model.invocation_for("dialogflow") == "my agent"


def test_unset_input_types_are_omitted() -> None:
    model = NeutralModel(invocation="hi", intents=[])

    assert model.to_json_obj() == {"invocation": "hi", "intents": []}
    assert model.invocation_for("dialogflow") == "hi"


def test_loader_lists_locales(tmp_path: Path, write_json: WriteJson) -> None:
    write_json(tmp_path / "models" / "en-US.json", {"intents": []})
    write_json(tmp_path / "models" / "de.json", {"intents": []})

    loader = ModelLoader(tmp_path / "models")

    assert loader.locales() == ["de", "en-US"]
    assert loader.has_model("de")
    assert not loader.has_model("fr")
    assert ModelLoader(tmp_path / "missing").locales() == []


def test_loader_errors(tmp_path: Path, write_json: WriteJson) -> None:
    loader = ModelLoader(tmp_path)
    (tmp_path / "bad.json").write_text("[", encoding="utf-8")
    write_json(tmp_path / "dup.json", {"intents": [{"name": "A"}, {"name": "A"}]})

    with pytest.raises(ModelNotFoundError):
        loader.get_model("en")
    with pytest.raises(ModelFileError):
        loader.get_model("bad")
    with pytest.raises(ModelFileError):
        loader.get_model("dup")


def test_save_refuses_to_overwrite(tmp_path: Path, read_json: ReadJson) -> None:
    loader = ModelLoader(tmp_path / "models")
    model = model_from_obj({"invocation": "", "intents": [{"name": "A", "phrases": ["hi"]}]})

    path = loader.save_model("en", model)

    assert read_json(path) == {"invocation": "", "intents": [{"name": "A", "phrases": ["hi"]}]}
    assert path.read_text(encoding="utf-8").endswith("}\n")
    with pytest.raises(ModelExistsError):
        loader.save_model("en", model)
    loader.save_model("en", model, overwrite=True)
    assert loader.get_model("en").intents[0].name == "A"
