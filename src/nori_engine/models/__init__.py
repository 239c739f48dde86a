"""Core value types: scores, specificity tiers and input events."""

from nori_engine.models.events import Error, Final, InputEvent, NoInput, Partial
from nori_engine.models.score import Score, ScoreKind, Specificity

__all__ = [
    "Error",
    "Final",
    "InputEvent",
    "NoInput",
    "Partial",
    "Score",
    "ScoreKind",
    "Specificity",
]
