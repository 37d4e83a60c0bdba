"""Neutral language-model schema (Pydantic models).

The neutral model is the platform-agnostic contract between a project's `models/<locale>.json`
files and every platform build. It is the long-lived artifact under version control; native
platform files are derived from it (forward build) or, on reverse build, used to regenerate it.

Platform-specific extension blocks are keyed by platform id. The `dialogflow` blocks are typed with
the sparse Dialogflow models; blocks for other platforms are kept verbatim as extra fields.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.dialogflow.schema import (
    DialogflowEntity,
    DialogflowIntent,
    DialogflowLanguageModel,
    DialogflowParameter,
)


class NeutralObject(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow",
    )


class Input(NeutralObject):
    """A named, typed slot that phrases reference as `{name}`.

    `type` is either the name of an `InputType` of the same model or a mapping of platform id to a
    platform type (e.g. `{"dialogflow": "@sys.date"}`). `text` is the sample value shown in place of
    the slot name inside native sample phrases.
    """

    name: str
    type: str | dict[str, str] | None = None
    text: str | None = None
    dialogflow: DialogflowParameter | None = None


class InputTypeValue(NeutralObject):
    value: str
    synonyms: list[str] = Field(default_factory=list)


class InputType(NeutralObject):
    """An enumerable entity type.

    A string `dialogflow` block only renames the native entity; a mapping is merged onto the
    default native entity.
    """

    name: str
    values: list[InputTypeValue] | None = None
    dialogflow: str | DialogflowEntity | None = None


class Intent(NeutralObject):
    name: str
    phrases: list[str] = Field(default_factory=list)
    inputs: list[Input] | None = None
    dialogflow: DialogflowIntent | None = None


class NeutralModel(NeutralObject):
    """A full language model for one locale."""

    invocation: str | dict[str, str] = ""
    intents: list[Intent] = Field(default_factory=list)
    input_types: list[InputType] | None = Field(default=None, alias="inputTypes")
    dialogflow: DialogflowLanguageModel | None = None

    @model_validator(mode="after")
    def validate_unique_intents(self) -> NeutralModel:
        """Reject models that declare the same intent name twice."""

        seen: set[str] = set()
        for intent in self.intents:
            if intent.name in seen:
                raise ValueError(f"duplicate intent name: {intent.name}")
            seen.add(intent.name)
        return self

    def find_input_types(self, name: str) -> list[InputType]:
        return [t for t in self.input_types or [] if t.name == name]

    def invocation_for(self, platform: str) -> str | None:
        if isinstance(self.invocation, dict):
            return self.invocation.get(platform)
        return self.invocation or None

    def to_json_obj(self) -> dict[str, Any]:
        """Dump to the `models/<locale>.json` shape, omitting unset collections."""

        return self.model_dump(by_alias=True, exclude_none=True)


def model_from_obj(obj: Any) -> NeutralModel:
    """Validate and parse a NeutralModel from an arbitrary decoded JSON object."""

    return NeutralModel.model_validate(obj)
