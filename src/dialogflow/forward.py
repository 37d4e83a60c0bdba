"""Forward build: neutral model -> Dialogflow agent files.

For each intent, in model order:
    1) build the native intent and one parameter per input (resolving custom input types and
       writing their entity/entries files on the way),
    2) merge the input- and intent-level `dialogflow` blocks on top,
    3) write the intent file and, if the intent has phrases, its sample file.

Raw native intents/entities from the model-level `dialogflow` block are written afterwards.

Any unresolved type aborts the build with an exception. Files written for earlier intents are
left in place.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from src.dialogflow.context import BuildContext
from src.dialogflow.defaults import default_entity
from src.dialogflow.phrases import encode_phrase
from src.dialogflow.schema import (
    CUSTOM_PREFIX,
    PLATFORM_ID,
    DialogflowEntity,
    DialogflowEntry,
    DialogflowIntent,
    DialogflowParameter,
    DialogflowResponse,
    is_builtin_type,
)
from src.model.merge import ArrayStrategy, deep_merge
from src.model.schema import Input, InputType, InputTypeValue, Intent, NeutralModel

logger = logging.getLogger(__name__)

_SYNONYM_DISALLOWED_RE = re.compile(r"[^0-9a-zA-Z\-_ ]")

# `responses` carries the computed parameters, so platform blocks merge into it element-wise.
_PLATFORM_MERGE_FIELDS: dict[str, ArrayStrategy] = {"responses": ArrayStrategy.by_index}


class DialogflowBuildError(ValueError):
    """Raised when a neutral model cannot be converted into Dialogflow files."""


class UnresolvedTypeError(DialogflowBuildError):
    """An input references a custom type that the model does not define."""


class MissingPlatformMappingError(DialogflowBuildError):
    """An input's platform-specific type lacks a `dialogflow` entry."""


@dataclass
class BuildResult:
    """Paths written by a forward build, grouped by kind."""

    intents: list[Path] = field(default_factory=list)
    user_says: list[Path] = field(default_factory=list)
    entities: list[Path] = field(default_factory=list)
    entries: list[Path] = field(default_factory=list)

    @property
    def written(self) -> list[Path]:
        return [*self.intents, *self.user_says, *self.entities, *self.entries]


def sanitize_synonym(text: str) -> str:
    """Strip characters Dialogflow does not accept in entity synonyms."""

    return _SYNONYM_DISALLOWED_RE.sub("", text)


def build_entries(values: Sequence[InputTypeValue]) -> list[DialogflowEntry]:
    """Convert neutral values into native entries.

    Each entry's synonyms start with the sanitized value itself, followed by the sanitized
    synonyms. Synonyms equal to the value and repeated synonyms are dropped.
    """

    entries: list[DialogflowEntry] = []
    for item in values:
        value_synonym = sanitize_synonym(item.value)
        synonyms: list[str] = [value_synonym]
        for synonym in item.synonyms:
            cleaned = sanitize_synonym(synonym)
            if cleaned in (item.value, value_synonym) or cleaned in synonyms:
                continue
            synonyms.append(cleaned)
        entries.append(DialogflowEntry(value=item.value, synonyms=synonyms))
    return entries


def build_entity(input_type: InputType) -> DialogflowEntity:
    """Default native entity with the input type's `dialogflow` block applied."""

    entity = default_entity(input_type.name)
    extension = input_type.dialogflow
    if isinstance(extension, str):
        entity.name = extension
    elif extension is not None:
        merged = deep_merge(entity.to_json_obj(), extension.to_json_obj())
        entity = DialogflowEntity.model_validate(merged)
    return entity


def _remember(paths: list[Path], path: Path) -> None:
    # Types shared by several inputs are rewritten each time; list each file once.
    if path not in paths:
        paths.append(path)


def _write_input_type(input_type: InputType, ctx: BuildContext, result: BuildResult) -> None:
    _remember(result.entities, ctx.files.write_entity(input_type.name, build_entity(input_type)))

    if input_type.values:
        entries = build_entries(input_type.values)
        _remember(
            result.entries,
            ctx.files.write_entries(input_type.name, ctx.output_locale, entries),
        )


def _resolve_data_type(
        item: Input,
        intent: Intent,
        model: NeutralModel,
        ctx: BuildContext,
        result: BuildResult,
) -> str:
    type_name = item.type
    if isinstance(type_name, dict):
        platform_type = type_name.get(PLATFORM_ID)
        if not platform_type:
            raise MissingPlatformMappingError(
                f'Please add a dialogflow property for input "{item.name}"'
            )
        if is_builtin_type(platform_type):
            return platform_type
        type_name = platform_type

    if not type_name:
        raise UnresolvedTypeError(f'Invalid input type in intent "{intent.name}"')
    if model.input_types is None:
        raise UnresolvedTypeError(f'Input type "{type_name}" must be defined in inputTypes')

    matched = model.find_input_types(type_name)
    if not matched:
        raise UnresolvedTypeError(f'Input type "{type_name}" must be defined in inputTypes')

    for input_type in matched:
        _write_input_type(input_type, ctx, result)
    return f"{CUSTOM_PREFIX}{type_name}"


def build_parameter(
        item: Input,
        intent: Intent,
        model: NeutralModel,
        ctx: BuildContext,
        result: BuildResult,
) -> DialogflowParameter:
    parameter = DialogflowParameter(
        is_list=False,
        name=item.name,
        value=f"${item.name}",
        data_type=_resolve_data_type(item, intent, model, ctx, result),
    )
    if item.dialogflow is not None:
        merged = deep_merge(parameter.to_json_obj(), item.dialogflow.to_json_obj())
        parameter = DialogflowParameter.model_validate(merged)
    return parameter


def build_intent(
        intent: Intent,
        model: NeutralModel,
        ctx: BuildContext,
        result: BuildResult,
) -> DialogflowIntent:
    """Build the native intent object (writing entity files for its custom input types)."""

    native = DialogflowIntent(name=intent.name, auto=True, webhook_used=True)

    if intent.inputs is not None:
        parameters = [build_parameter(i, intent, model, ctx, result) for i in intent.inputs]
        native.responses = [DialogflowResponse(parameters=parameters)]

    if intent.dialogflow is not None:
        merged = deep_merge(
            native.to_json_obj(),
            intent.dialogflow.to_json_obj(),
            fields=_PLATFORM_MERGE_FIELDS,
        )
        native = DialogflowIntent.model_validate(merged)
    return native


def _write_raw_blocks(model: NeutralModel, ctx: BuildContext, result: BuildResult) -> None:
    raw = model.dialogflow
    if raw is None:
        return

    for native_intent in raw.intents or []:
        if not native_intent.name:
            raise DialogflowBuildError("Raw dialogflow intents must have a name")
        result.intents.append(ctx.files.write_intent(native_intent))
        if native_intent.user_says:
            result.user_says.append(
                ctx.files.write_user_says(
                    native_intent.name,
                    ctx.output_locale,
                    native_intent.user_says,
                )
            )

    for native_entity in raw.entities or []:
        if not native_entity.name:
            raise DialogflowBuildError("Raw dialogflow entities must have a name")
        result.entities.append(ctx.files.write_entity(native_entity.name, native_entity))
        if native_entity.entries:
            result.entries.append(
                ctx.files.write_entries(
                    native_entity.name,
                    ctx.output_locale,
                    native_entity.entries,
                )
            )


def build_language_model(model: NeutralModel, ctx: BuildContext) -> BuildResult:
    """Write the Dialogflow files for `model` into `ctx.files`.

    Raises:
        UnresolvedTypeError: If an input type is missing or not defined in `inputTypes`.
        MissingPlatformMappingError: If a platform-specific input type has no Dialogflow entry.
    """

    result = BuildResult()
    ctx.files.ensure_intents_dir()

    for intent in model.intents:
        native = build_intent(intent, model, ctx, result)
        result.intents.append(ctx.files.write_intent(native))

        parameters = native.parameters()
        records = [encode_phrase(p, parameters, intent.inputs or []) for p in intent.phrases]
        if records:
            result.user_says.append(
                ctx.files.write_user_says(intent.name, ctx.output_locale, records)
            )

    _write_raw_blocks(model, ctx, result)

    logger.info(
        "built locale=%s intents=%d entities=%d",
        ctx.locale,
        len(result.intents),
        len(result.entities),
    )
    return result
