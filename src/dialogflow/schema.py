"""Dialogflow agent schema (Pydantic models).

These models describe the on-disk JSON of a Dialogflow agent export: one intent file per intent,
an optional `<intent>_usersays_<locale>.json` sample file, one entity file per entity and an
optional `<entity>_entries_<locale>.json` values file.

Every field is optional so the same models describe complete native objects and the sparse patches
stored in a neutral model's `dialogflow` blocks. Unknown native fields are preserved as extras so
that round-tripping an agent does not lose data.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PLATFORM_ID = "dialogflow"
BUILTIN_PREFIX = "@sys."
CUSTOM_PREFIX = "@"
WELCOME_EVENT = "WELCOME"


class DialogflowObject(BaseModel):
    """Base for native objects: camelCase on disk, extras preserved."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_json_obj(self) -> dict[str, Any]:
        """Dump to the on-disk JSON shape, omitting unset (`None`) fields."""

        return self.model_dump(by_alias=True, exclude_none=True)


class UserSaysData(DialogflowObject):
    """One token of a sample phrase: literal text or an annotated slot."""

    text: str = ""
    user_defined: bool = False
    alias: str | None = None
    meta: str | None = None


class UserSays(DialogflowObject):
    """A sample phrase as stored in a `_usersays_` file."""

    data: list[UserSaysData] = Field(default_factory=list)
    is_template: bool = False
    count: int = 0


class DialogflowParameter(DialogflowObject):
    """A slot declared on the first response of an intent."""

    name: str | None = None
    data_type: str | None = None
    value: str | None = None
    is_list: bool | None = None


class DialogflowMessage(DialogflowObject):
    """A localized text response."""

    type: int | str | None = None
    lang: str | None = None
    speech: str | list[str] | None = None


class DialogflowResponse(DialogflowObject):
    reset_contexts: bool | None = None
    affected_contexts: list[Any] | None = None
    parameters: list[DialogflowParameter] | None = None
    messages: list[DialogflowMessage] | None = None
    default_response_platforms: dict[str, Any] | None = None
    speech: list[Any] | None = None


class DialogflowIntent(DialogflowObject):
    """A native intent file, or a sparse patch of one.

    `user_says` only appears on raw intents embedded in a neutral model; it is written to the
    companion sample file and never into the intent file itself.
    """

    name: str | None = None
    auto: bool | None = None
    contexts: list[Any] | None = None
    responses: list[DialogflowResponse] | None = None
    priority: int | None = None
    webhook_used: bool | None = None
    webhook_for_slot_filling: bool | None = None
    fallback_intent: bool | None = None
    events: list[Any] | None = None
    user_says: list[UserSays] | None = None

    def first_response(self) -> DialogflowResponse | None:
        return self.responses[0] if self.responses else None

    def parameters(self) -> list[DialogflowParameter]:
        """All parameters declared across responses, in declaration order."""

        return [p for response in self.responses or [] for p in response.parameters or []]

    def is_welcome(self) -> bool:
        """Whether the intent is triggered by the platform's welcome event."""

        for event in self.events or []:
            name = event.get("name") if isinstance(event, dict) else event
            if name == WELCOME_EVENT:
                return True
        return False


class DialogflowEntry(DialogflowObject):
    """One entity value and its synonyms, as stored in an `_entries_` file."""

    value: str
    synonyms: list[str] = Field(default_factory=list)


class DialogflowEntity(DialogflowObject):
    """A native entity file, or a sparse patch of one.

    `entries` only appears on raw entities embedded in a neutral model; it is written to the
    companion entries file and never into the entity file itself.
    """

    name: str | None = None
    is_overridable: bool | None = None
    is_enum: bool | None = None
    automated_expansion: bool | None = None
    entries: list[DialogflowEntry] | None = None


class DialogflowLanguageModel(DialogflowObject):
    """Raw platform block of a neutral model (`"dialogflow": {...}` at model level)."""

    intents: list[DialogflowIntent] | None = None
    entities: list[DialogflowEntity] | None = None


def is_builtin_type(data_type: str | None) -> bool:
    """Whether a native `dataType` refers to a platform system entity."""

    return bool(data_type) and str(data_type).startswith(BUILTIN_PREFIX)
