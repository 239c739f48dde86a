"""Fuzzy template matching of utterances against skill patterns.

Input and examples are normalized (lower case, no diacritics, punctuation
turned into spaces) and compared by normalized Levenshtein similarity. A
pattern may also declare a regular expression, searched in the normalized
input, whose groups are handed to the pattern's builder.
"""

from __future__ import annotations

import re
import string
import unicodedata
from abc import abstractmethod
from collections.abc import Callable, Sequence
from functools import cached_property
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from rapidfuzz.distance import Levenshtein

from nori_engine.models.score import Score
from nori_engine.skill.base import InputData, Skill
from nori_engine.skill.context import SkillContext

T = TypeVar("T")

_ASCII_PUNCTUATION = frozenset(string.punctuation)


def _is_punctuation(char: str) -> bool:
    return char in _ASCII_PUNCTUATION or unicodedata.category(char).startswith("P")


def normalize_with_offsets(raw: str) -> tuple[str, list[int]]:
    """Normalize raw, also returning the raw index every output character came from."""
    chars: list[str] = []
    offsets: list[int] = []
    for index, raw_char in enumerate(raw):
        # Lower case after decomposing: compatibility forms like "ℌ" decompose to capitals
        decomposed = unicodedata.normalize("NFKD", raw_char).lower()
        for char in unicodedata.normalize("NFKD", decomposed):
            if unicodedata.combining(char):
                continue
            if _is_punctuation(char) or char.isspace():
                # Collapse runs of separators and drop leading ones
                if not chars or chars[-1] == " ":
                    continue
                char = " "
            chars.append(char)
            offsets.append(index)

    if chars and chars[-1] == " ":
        chars.pop()
        offsets.pop()
    return "".join(chars), offsets


def normalize(text: str) -> str:
    return normalize_with_offsets(text)[0]


def similarity(a: str, b: str) -> float:
    """1 - levenshtein(a, b) / max(len(a), len(b)); two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(a, b) / longest


class Capture:
    """A regex match on normalized text, read back in the raw text's own spelling."""

    def __init__(self, match: re.Match[str], raw: str, offsets: list[int]) -> None:
        self.match = match
        self.raw = raw
        self._offsets = offsets

    def normalized(self, group: int | str = 0) -> str | None:
        return self.match.group(group)

    def group(self, group: int | str = 0) -> str | None:
        """The raw substring the group matched, or None if it did not take part."""
        start, end = self.match.span(group)
        if start < 0:
            return None
        if start == end:
            return ""
        return self.raw[self._offsets[start] : self._offsets[end - 1] + 1]

    def __getitem__(self, group: int | str) -> str | None:
        return self.group(group)

    def __repr__(self) -> str:
        return f"Capture({self.match.re.pattern!r}, {self.group()!r})"


class Pattern(BaseModel, Generic[T]):
    """A named group of example phrases, optionally with a capture expression.

    The builder turns the capture (None for patterns without expression) into
    the data the skill will work with. Without a builder the data is the
    pattern name.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    examples: list[str] = []
    expression: re.Pattern[str] | None = None
    builder: Callable[[Capture | None], T] | None = None

    @cached_property
    def normalized_examples(self) -> list[str]:
        return [normalize(example) for example in self.examples]

    def build(self, capture: Capture | None) -> T | str:
        if self.builder is None:
            return self.name
        return self.builder(capture)


def score_patterns(patterns: Sequence[Pattern[Any]], text: str) -> tuple[Score, Any]:
    """Score text against patterns, returning the best score and its built data.

    Patterns whose expression does not match are skipped. With nothing left
    to compare against, the result is (always-worst, None).
    """
    normalized, offsets = normalize_with_offsets(text)

    best_score: float | None = None
    best_pattern: Pattern[Any] | None = None
    best_capture: Capture | None = None

    for pattern in patterns:
        capture = None
        floor = 0.0
        if pattern.expression is not None:
            match = pattern.expression.search(normalized)
            if match is None:
                continue
            capture = Capture(match, text, offsets)
            floor = 1.0

        pattern_score = max(
            [floor, *(similarity(normalized, example) for example in pattern.normalized_examples)]
        )
        # Strictly greater, so that ties go to the first pattern
        if best_score is None or pattern_score > best_score:
            best_score = pattern_score
            best_pattern = pattern
            best_capture = capture

    if best_pattern is None:
        return Score.always_worst(), None
    return Score.numeric(best_score), best_pattern.build(best_capture)


class FuzzyRecognizerSkill(Skill[InputData]):
    """A skill whose score comes from matching its patterns."""

    @property
    @abstractmethod
    def patterns(self) -> list[Pattern[Any]]:
        """Patterns in priority order: the first one wins ties."""

    def score(self, ctx: SkillContext, text: str) -> tuple[Score, InputData]:
        return score_patterns(self.patterns, text)
