"""Reverse build: Dialogflow agent files -> neutral model.

The agent directory is the source of truth here. Intent files become neutral intents (non-default
native fields are kept in each intent's `dialogflow` block); fallback and welcome intents are
routed into the model-level `dialogflow.intents` list instead, so a later forward build writes
them back verbatim. Entity files become input types.
"""

from __future__ import annotations

import logging

from src.dialogflow.context import BuildContext
from src.dialogflow.defaults import entity_patch, intent_patch
from src.dialogflow.forward import sanitize_synonym
from src.dialogflow.phrases import decode_user_says
from src.dialogflow.schema import (
    CUSTOM_PREFIX,
    PLATFORM_ID,
    DialogflowEntity,
    DialogflowIntent,
    DialogflowLanguageModel,
    is_builtin_type,
)
from src.model.schema import Input, InputType, InputTypeValue, Intent, NeutralModel

logger = logging.getLogger(__name__)


def inputs_from_parameters(native: DialogflowIntent) -> list[Input]:
    """Derive neutral inputs from the parameters declared on an intent's responses."""

    inputs: list[Input] = []
    for parameter in native.parameters():
        if not parameter.data_type or not parameter.name:
            continue
        if is_builtin_type(parameter.data_type):
            input_type: str | dict[str, str] = {PLATFORM_ID: parameter.data_type}
        else:
            input_type = parameter.data_type.removeprefix(CUSTOM_PREFIX)
        inputs.append(Input(name=parameter.name, type=input_type))
    return inputs


def _special_intent(native: DialogflowIntent, ctx: BuildContext) -> DialogflowIntent:
    """Named patch for a fallback/welcome intent, carrying its samples for this locale."""

    patch = intent_patch(native, ctx.locale) or DialogflowIntent()
    patch.name = native.name
    user_says = ctx.files.read_user_says(native.name or "", ctx.output_locale)
    if user_says:
        patch.user_says = user_says
    return patch


def reverse_intent(native: DialogflowIntent, ctx: BuildContext) -> Intent:
    """Convert one native intent (and its locale's sample file, if any) into a neutral intent."""

    intent = Intent(name=native.name or "", dialogflow=intent_patch(native, ctx.locale))

    inputs = inputs_from_parameters(native)
    if inputs:
        intent.inputs = inputs

    records = ctx.files.read_user_says(intent.name, ctx.output_locale)
    for record in records or []:
        intent.phrases.append(decode_user_says(record, inputs))
    return intent


def reverse_input_type(
        native: DialogflowEntity,
        ctx: BuildContext,
        file_stem: str | None = None,
) -> InputType:
    """Convert one native entity (and its locale's entries file, if any) into an input type.

    The input type is named after the entity file, which is what intent parameters reference. A
    native name that differs from the file name is kept in the `dialogflow` block: as the string
    shorthand when no flag differs from the defaults, otherwise on the entity patch.
    """

    name = file_stem or native.name or ""
    patch = entity_patch(native)
    extension: str | DialogflowEntity | None = patch
    if native.name and native.name != name:
        if patch is None:
            extension = native.name
        else:
            patch.name = native.name
    input_type = InputType(name=name, dialogflow=extension)

    values: list[InputTypeValue] = []
    for entry in ctx.files.read_entries(name, ctx.output_locale) or []:
        # Forward build adds the sanitized value as the first synonym.
        dropped = (entry.value, sanitize_synonym(entry.value))
        synonyms = [s for s in entry.synonyms if s not in dropped]
        values.append(InputTypeValue(value=entry.value, synonyms=synonyms))
    if values:
        input_type.values = values
    return input_type


def _append_platform_intent(model: NeutralModel, patch: DialogflowIntent) -> None:
    if model.dialogflow is None:
        model.dialogflow = DialogflowLanguageModel(intents=[])
    if model.dialogflow.intents is None:
        model.dialogflow.intents = []
    model.dialogflow.intents.append(patch)


def reverse_language_model(ctx: BuildContext) -> NeutralModel:
    """Build a neutral model for `ctx.locale` from the agent files in `ctx.files`."""

    model = NeutralModel(invocation="", intents=[])
    input_types: list[InputType] = []

    for path in ctx.files.intent_files():
        native = ctx.files.read_intent(path)
        if not native.name:
            native.name = path.stem

        if native.fallback_intent is True:
            logger.debug("fallback intent name=%s", native.name)
            _append_platform_intent(model, _special_intent(native, ctx))
            continue
        if native.is_welcome():
            logger.debug("welcome intent name=%s", native.name)
            _append_platform_intent(model, _special_intent(native, ctx))
            continue

        model.intents.append(reverse_intent(native, ctx))

    for path in ctx.files.entity_files():
        native_entity = ctx.files.read_entity(path)
        input_types.append(reverse_input_type(native_entity, ctx, path.stem))

    if input_types:
        model.input_types = input_types

    logger.info(
        "reverse built locale=%s intents=%d input_types=%d",
        ctx.locale,
        len(model.intents),
        len(input_types),
    )
    return model
