"""Default native objects and the default-property filter.

Reverse build keeps only the native fields that differ from these defaults in a neutral model's
`dialogflow` block; forward build merges that block back on top of a freshly constructed native
object. Comparisons are explicit per field:

    - scalars differ by strict inequality,
    - `contexts` / `events` differ when the symmetric set difference is non-empty,
    - first-response blocks differ by structural equality,
    - messages are only kept for the locale being processed.

A field missing from the native object never counts as different.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from src.dialogflow.schema import (
    DialogflowEntity,
    DialogflowIntent,
    DialogflowMessage,
    DialogflowResponse,
)

DEFAULT_INTENT = DialogflowIntent(
    auto=True,
    contexts=[],
    responses=[
        DialogflowResponse(
            reset_contexts=False,
            affected_contexts=[],
            parameters=[],
            default_response_platforms={},
            speech=[],
        )
    ],
    priority=500000,
    webhook_used=False,
    webhook_for_slot_filling=False,
    fallback_intent=False,
    events=[],
)

DEFAULT_ENTITY = DialogflowEntity(
    is_overridable=True,
    is_enum=False,
    automated_expansion=False,
)

_INTENT_SCALARS: tuple[str, ...] = (
    "auto",
    "priority",
    "webhook_used",
    "webhook_for_slot_filling",
    "fallback_intent",
)
_INTENT_SETS: tuple[str, ...] = ("contexts", "events")
_RESPONSE_FIELDS: tuple[str, ...] = (
    "reset_contexts",
    "affected_contexts",
    "default_response_platforms",
    "speech",
)
_ENTITY_SCALARS: tuple[str, ...] = ("is_overridable", "is_enum", "automated_expansion")


def _differs_as_set(values: Sequence[Any], defaults: Sequence[Any]) -> bool:
    # Items may be dicts (e.g. events), so compare by membership rather than hashing.
    return any(v not in defaults for v in values) or any(d not in values for d in defaults)


def _locale_messages(
        messages: Sequence[DialogflowMessage],
        locale: str,
) -> list[DialogflowMessage]:
    wanted = locale.lower()
    return [
        m.model_copy(deep=True)
        for m in messages
        if (m.lang or "").lower() == wanted and m.speech
    ]


def _response_patch(
        response: DialogflowResponse,
        default: DialogflowResponse,
        locale: str,
) -> DialogflowResponse | None:
    patch: dict[str, Any] = {}
    for field in _RESPONSE_FIELDS:
        value = getattr(response, field)
        if value is not None and value != getattr(default, field):
            patch[field] = value

    if response.messages:
        messages = _locale_messages(response.messages, locale)
        if messages:
            patch["messages"] = messages

    if not patch:
        return None
    return DialogflowResponse.model_validate(patch)


def intent_patch(native: DialogflowIntent, locale: str) -> DialogflowIntent | None:
    """Return the fields of `native` that differ from `DEFAULT_INTENT`, or `None`.

    Response parameters are never copied: reverse build turns them into neutral inputs.
    """

    patch: dict[str, Any] = {}

    for field in _INTENT_SCALARS:
        value = getattr(native, field)
        if value is not None and value != getattr(DEFAULT_INTENT, field):
            patch[field] = value

    for field in _INTENT_SETS:
        value = getattr(native, field)
        if value is not None and _differs_as_set(value, getattr(DEFAULT_INTENT, field)):
            patch[field] = list(value)

    first = native.first_response()
    default_first = DEFAULT_INTENT.first_response()
    assert default_first is not None
    if first is not None and native.responses != DEFAULT_INTENT.responses:
        response = _response_patch(first, default_first, locale)
        if response is not None:
            patch["responses"] = [response]

    if not patch:
        return None
    return DialogflowIntent.model_validate(patch)


def entity_patch(native: DialogflowEntity) -> DialogflowEntity | None:
    """Return the entity flags of `native` that differ from `DEFAULT_ENTITY`, or `None`."""

    patch: dict[str, Any] = {}
    for field in _ENTITY_SCALARS:
        value = getattr(native, field)
        if value is not None and value != getattr(DEFAULT_ENTITY, field):
            patch[field] = value

    if not patch:
        return None
    return DialogflowEntity.model_validate(patch)


def default_entity(name: str) -> DialogflowEntity:
    """A fresh native entity with default flags."""

    return DEFAULT_ENTITY.model_copy(update={"name": name}, deep=True)
