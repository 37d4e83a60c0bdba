"""Tests for phrase tokenization and the sample-phrase encode/decode pair."""

from __future__ import annotations

import pytest

from src.dialogflow.phrases import (
    PhraseToken,
    decode_user_says,
    detokenize,
    encode_phrase,
    tokenize,
)
from src.dialogflow.schema import DialogflowParameter, UserSays
from src.model.schema import Input

_PARAMETERS = [
    DialogflowParameter(name="city", data_type="@city", value="$city", is_list=False),
    DialogflowParameter(name="date", data_type="@sys.date", value="$date", is_list=False),
]


def test_tokenize_text_and_slots() -> None:
    assert tokenize("book a flight to {city} on {date}") == [
        PhraseToken("book a flight to "),
        PhraseToken("city", is_slot=True),
        PhraseToken(" on "),
        PhraseToken("date", is_slot=True),
    ]


def test_slot_at_start_emits_no_empty_literal() -> None:
    assert tokenize("{city} please") == [
        PhraseToken("city", is_slot=True),
        PhraseToken(" please"),
    ]


def test_phrase_without_slots_is_one_literal() -> None:
    assert tokenize("hello there") == [PhraseToken("hello there")]


@pytest.mark.parametrize(
    "phrase",
    [
        "hello",
        "{city}",
        "fly from {city} to {city} tomorrow",
        "{date}{city}",
        "book a flight to {city}",
    ],
)
def test_decode_encode_round_trip(phrase: str) -> None:
    assert detokenize(tokenize(phrase)) == phrase
    record = encode_phrase(phrase, _PARAMETERS, [])
    assert decode_user_says(record, []) == phrase


def test_encode_annotates_slots_from_parameters() -> None:
    record = encode_phrase("book a flight to {city}", _PARAMETERS, [])

    assert record.to_json_obj() == {
        "data": [
            {"text": "book a flight to ", "userDefined": False},
            {"text": "city", "userDefined": True, "alias": "city", "meta": "@city"},
        ],
        "isTemplate": False,
        "count": 0,
    }


def test_encode_uses_recorded_sample_text() -> None:
    inputs = [Input(name="city", type="city", text="Berlin")]

    record = encode_phrase("to {city}", _PARAMETERS, inputs)

    assert record.data[1].text == "Berlin"
    assert record.data[1].alias == "city"


def test_undeclared_slot_has_no_alias() -> None:
    record = encode_phrase("{unknown}", _PARAMETERS, [])
    assert record.data[0].alias is None
    assert record.data[0].user_defined is True


def test_decode_backfills_sample_text() -> None:
    record = UserSays.model_validate(
        {
            "data": [
                {"text": "book a flight to ", "userDefined": False},
                {"text": "Paris", "alias": "city", "meta": "@city", "userDefined": True},
            ]
        }
    )
    inputs = [Input(name="city", type="city")]

    phrase = decode_user_says(record, inputs)

    assert phrase == "book a flight to {city}"
    assert inputs[0].text == "Paris"
