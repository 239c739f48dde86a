"""Tiered skill ranking over a stack of candidate batches."""

from __future__ import annotations

import logging
from typing import Any

from nori_engine.config import DEFAULT_ACCEPTANCE_THRESHOLD
from nori_engine.models.score import Score, Specificity
from nori_engine.skill.base import Skill
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import SkillOutput

logger = logging.getLogger(__name__)


class SkillWithResult:
    """A skill together with the score and data it produced for some input."""

    def __init__(self, skill: Skill[Any], score: Score, input_data: Any) -> None:
        self.skill = skill
        self.score = score
        self.input_data = input_data

    async def generate_output(self, ctx: SkillContext) -> SkillOutput:
        return await self.skill.generate_output(ctx, self.input_data)

    def __repr__(self) -> str:
        return f"SkillWithResult({self.skill!r}, score={self.score})"


def score_and_wrap(skill: Skill[Any], ctx: SkillContext, text: str) -> SkillWithResult:
    score, input_data = skill.score(ctx, text)
    return SkillWithResult(skill, score, input_data)


class SkillRanker:
    """Picks the skill that best handles an utterance.

    Candidates are the skills of every pushed batch, top batch first, followed
    by the default batch. A more specific tier always wins over a less specific
    one, provided its best score is acceptable. Every candidate of a tier is
    scored before picking, and ties go to the first candidate.
    """

    def __init__(
        self,
        default_batch: list[Skill[Any]],
        fallback_skill: Skill[Any],
        acceptance_threshold: float = DEFAULT_ACCEPTANCE_THRESHOLD,
    ) -> None:
        self._default_batch = list(default_batch)
        self._fallback_skill = fallback_skill
        self.acceptance_threshold = acceptance_threshold
        self._batches: list[list[Skill[Any]]] = []

    @property
    def default_batch(self) -> list[Skill[Any]]:
        return list(self._default_batch)

    @property
    def depth(self) -> int:
        """Number of pushed batches, the default one excluded."""
        return len(self._batches)

    def get_best(self, ctx: SkillContext, text: str) -> SkillWithResult | None:
        candidates = [skill for batch in reversed(self._batches) for skill in batch]
        candidates.extend(self._default_batch)

        for specificity in sorted(Specificity, reverse=True):
            tier = [skill for skill in candidates if skill.specificity == specificity]
            if not tier:
                continue

            best: SkillWithResult | None = None
            for skill in tier:
                result = score_and_wrap(skill, ctx, text)
                if best is None or result.score > best.score:
                    best = result

            if best is not None and best.score.is_acceptable(self.acceptance_threshold):
                logger.debug("%r chosen for %r in tier %s", best, text, specificity.name)
                return best
            logger.debug("No acceptable %s skill for %r (best %r)", specificity.name, text, best)

        return None

    def get_fallback_skill(self, ctx: SkillContext, text: str) -> SkillWithResult:
        return score_and_wrap(self._fallback_skill, ctx, text)

    def add_batch_to_top(self, skills: list[Skill[Any]]) -> None:
        self._batches.append(list(skills))
        logger.debug("Pushed batch %r, depth %d", skills, self.depth)

    def remove_top_batch(self) -> None:
        if self._batches:
            self._batches.pop()
            logger.debug("Popped top batch, depth %d", self.depth)

    def remove_all_batches(self) -> None:
        self._batches.clear()

    def has_any_batches(self) -> bool:
        return bool(self._batches)
