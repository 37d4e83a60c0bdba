"""Sample-phrase tokenization.

Neutral phrases are plain strings with `{slot}` placeholders, e.g. `"book a flight to {city}"`.
Dialogflow stores the same phrase as a list of data tokens: literal text spans and annotated slot
spans (`alias` = slot name, `meta` = native data type, `text` = the sample value shown).
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from src.dialogflow.schema import DialogflowParameter, UserSays, UserSaysData
from src.model.schema import Input

_SLOT_RE = re.compile(r"\{(.*?)\}")


@dataclass(frozen=True)
class PhraseToken:
    """A literal text span (`is_slot=False`) or a slot reference (`is_slot=True`)."""

    text: str
    is_slot: bool = False


def tokenize(phrase: str) -> list[PhraseToken]:
    """Split a phrase into literal and slot tokens, left to right.

    Empty literal spans (e.g. before a slot at position 0, or between adjacent slots) are skipped.
    A phrase without placeholders yields a single literal token.
    """

    tokens: list[PhraseToken] = []
    pos = 0
    for match in _SLOT_RE.finditer(phrase):
        literal = phrase[pos:match.start()]
        if literal:
            tokens.append(PhraseToken(literal))
        tokens.append(PhraseToken(match.group(1), is_slot=True))
        pos = match.end()

    if pos < len(phrase):
        tokens.append(PhraseToken(phrase[pos:]))

    if not tokens:
        tokens.append(PhraseToken(phrase))
    return tokens


def detokenize(tokens: Iterable[PhraseToken]) -> str:
    """Inverse of `tokenize`: restore `{}` around slot names."""

    return "".join(f"{{{t.text}}}" if t.is_slot else t.text for t in tokens)


def _slot_data(
        slot: str,
        parameters: Sequence[DialogflowParameter],
        inputs: Sequence[Input],
) -> UserSaysData:
    data = UserSaysData(text=slot, user_defined=True)

    for item in inputs:
        if item.name == slot and item.text:
            data.text = item.text

    for parameter in parameters:
        if parameter.name == slot:
            data.alias = parameter.name
            data.meta = parameter.data_type
    return data


def encode_phrase(
        phrase: str,
        parameters: Sequence[DialogflowParameter] = (),
        inputs: Sequence[Input] = (),
) -> UserSays:
    """Convert a neutral phrase into a native sample-phrase record.

    Slots are annotated with `alias`/`meta` from the intent's built parameters and shown with the
    matching input's sample `text`, if one was recorded.
    """

    data = [
        _slot_data(token.text, parameters, inputs)
        if token.is_slot
        else UserSaysData(text=token.text, user_defined=False)
        for token in tokenize(phrase)
    ]
    return UserSays(data=data, is_template=False, count=0)


def decode_user_says(record: UserSays, inputs: Sequence[Input] = ()) -> str:
    """Convert a native sample-phrase record back into a neutral phrase.

    Slot tokens whose shown text differs from the slot name back-fill that text into the matching
    input's `text`, so the next forward build shows the same sample value.
    """

    tokens: list[PhraseToken] = []
    for data in record.data:
        if data.alias:
            tokens.append(PhraseToken(data.alias, is_slot=True))
            if data.text != data.alias:
                for item in inputs:
                    if item.name == data.alias:
                        item.text = data.text
        else:
            tokens.append(PhraseToken(data.text))
    return detokenize(tokens)
