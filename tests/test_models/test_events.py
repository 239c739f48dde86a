"""Tests for input events."""

import pytest
from pydantic import ValidationError

from nori_engine.models.events import Error, Final, NoInput, Partial


def test_final_of_assigns_decreasing_confidence() -> None:
    event = Final.of("call michael", "call michel")
    assert event.utterances == [("call michael", 1.0), ("call michel", 0.9)]


def test_final_requires_an_utterance() -> None:
    with pytest.raises(ValidationError):
        Final(utterances=[])


def test_error_keeps_cause() -> None:
    cause = RuntimeError("microphone unplugged")
    assert Error(cause=cause).cause is cause


def test_partial_and_no_input() -> None:
    assert Partial(utterance="call mi").utterance == "call mi"
    assert NoInput() == NoInput()
