"""Fuzzy pattern recognizer used by skills to score utterances."""

from nori_engine.recognizer.fuzzy import (
    Capture,
    FuzzyRecognizerSkill,
    Pattern,
    normalize,
    normalize_with_offsets,
    score_patterns,
    similarity,
)

__all__ = [
    "Capture",
    "FuzzyRecognizerSkill",
    "Pattern",
    "normalize",
    "normalize_with_offsets",
    "score_patterns",
    "similarity",
]
