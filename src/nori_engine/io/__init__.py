"""Input and output devices the evaluator talks to."""

from nori_engine.io.speech import (
    ConsoleSpeechDevice,
    InstantSpeechDevice,
    NothingSpeechDevice,
    SpeechOutputDevice,
)
from nori_engine.io.stt import SttInputDevice, TextInputDevice

__all__ = [
    "ConsoleSpeechDevice",
    "InstantSpeechDevice",
    "NothingSpeechDevice",
    "SpeechOutputDevice",
    "SttInputDevice",
    "TextInputDevice",
]
