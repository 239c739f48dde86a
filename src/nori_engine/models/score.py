"""Ranking primitives: how specific a skill is and how well it matched.

Specificity dominates score. A skill in a higher tier wins over any skill in a
lower tier, as long as its score is acceptable:

    HIGH    -> scored first, wins if acceptable
    MEDIUM  -> scored only when no HIGH skill was acceptable
    LOW     -> scored last

Score is a tagged union rather than a float with magic values, so that the two
sentinels never get mixed up with real similarities.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Specificity(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


class ScoreKind(StrEnum):
    ALWAYS_WORST = "always_worst"
    NUMERIC = "numeric"
    ALWAYS_BEST = "always_best"


_KIND_RANK = {
    ScoreKind.ALWAYS_WORST: 0,
    ScoreKind.NUMERIC: 1,
    ScoreKind.ALWAYS_BEST: 2,
}


class Score(BaseModel):
    """Result of matching an utterance against a skill.

    Ordering: always-best > any numeric value > always-worst. Numeric values
    compare by value.
    """

    model_config = ConfigDict(frozen=True)

    kind: ScoreKind
    value: float = Field(default=0.0, ge=0.0, le=1.0)

    @classmethod
    def numeric(cls, value: float) -> Score:
        return cls(kind=ScoreKind.NUMERIC, value=value)

    @classmethod
    def always_best(cls) -> Score:
        return cls(kind=ScoreKind.ALWAYS_BEST, value=1.0)

    @classmethod
    def always_worst(cls) -> Score:
        return cls(kind=ScoreKind.ALWAYS_WORST, value=0.0)

    def _sort_key(self) -> tuple[int, float]:
        return (_KIND_RANK[self.kind], self.value if self.kind == ScoreKind.NUMERIC else 0.0)

    def __lt__(self, other: Score) -> bool:
        return self._sort_key() < other._sort_key()

    def __le__(self, other: Score) -> bool:
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: Score) -> bool:
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: Score) -> bool:
        return self._sort_key() >= other._sort_key()

    def is_better_than(self, other: Score) -> bool:
        return self > other

    def is_acceptable(self, threshold: float) -> bool:
        """Whether this score is good enough for the skill to be chosen."""
        if self.kind == ScoreKind.ALWAYS_BEST:
            return True
        if self.kind == ScoreKind.ALWAYS_WORST:
            return False
        return self.value >= threshold

    def __str__(self) -> str:
        if self.kind == ScoreKind.NUMERIC:
            return f"{self.value:.2f}"
        return self.kind.value
