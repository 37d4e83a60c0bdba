"""Deep merge of JSON-like mappings with per-field array strategies.

Language models and platform blocks are merged from several sources (the model file, project
config overrides, platform extension blocks). Later sources win for scalars; what happens to lists
depends on the field:

    - `concat`: append the source items to the target items,
    - `overwrite`: replace the target list with the source list,
    - `by_index`: merge items pairwise (mappings recursively), extra source items are appended.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from enum import StrEnum
from typing import Any


class ArrayStrategy(StrEnum):
    """How a list in the source combines with a list in the target."""

    concat = "concat"
    overwrite = "overwrite"
    by_index = "by_index"


def _merge_lists(
        target: list[Any],
        source: list[Any],
        strategy: ArrayStrategy,
        *,
        arrays: ArrayStrategy,
        fields: Mapping[str, ArrayStrategy],
) -> list[Any]:
    if strategy == ArrayStrategy.overwrite:
        return copy.deepcopy(source)
    if strategy == ArrayStrategy.concat:
        return copy.deepcopy(target) + copy.deepcopy(source)

    merged: list[Any] = []
    for idx in range(max(len(target), len(source))):
        if idx >= len(source):
            merged.append(copy.deepcopy(target[idx]))
        elif idx >= len(target):
            merged.append(copy.deepcopy(source[idx]))
        elif isinstance(target[idx], Mapping) and isinstance(source[idx], Mapping):
            merged.append(deep_merge(target[idx], source[idx], arrays=arrays, fields=fields))
        else:
            merged.append(copy.deepcopy(source[idx]))
    return merged


def deep_merge(
        target: Mapping[str, Any],
        source: Mapping[str, Any] | None,
        *,
        arrays: ArrayStrategy = ArrayStrategy.concat,
        fields: Mapping[str, ArrayStrategy] | None = None,
) -> dict[str, Any]:
    """Return a new dict with `source` merged on top of `target`.

    Neither input is mutated. `arrays` is the default list strategy; `fields` overrides it for
    specific keys at any nesting depth (e.g. `{"responses": ArrayStrategy.by_index}`).
    """

    field_strategies: Mapping[str, ArrayStrategy] = fields or {}
    merged: dict[str, Any] = copy.deepcopy(dict(target))
    if not source:
        return merged

    for key, value in source.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value, arrays=arrays, fields=field_strategies)
        elif isinstance(current, list) and isinstance(value, list):
            strategy = field_strategies.get(key, arrays)
            merged[key] = _merge_lists(
                current,
                value,
                strategy,
                arrays=arrays,
                fields=field_strategies,
            )
        elif value is None and key in merged:
            # `None` in a source means "not set", never "unset the target value".
            continue
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_all(
        target: Mapping[str, Any],
        *sources: Mapping[str, Any] | None,
        arrays: ArrayStrategy = ArrayStrategy.concat,
        fields: Mapping[str, ArrayStrategy] | None = None,
) -> dict[str, Any]:
    """Merge several sources onto `target` from left to right."""

    merged = dict(target)
    for source in sources:
        merged = deep_merge(merged, source, arrays=arrays, fields=fields)
    return merged
