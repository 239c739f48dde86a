"""Building blocks shared by several skills."""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

from nori_engine.models.score import Score, Specificity
from nori_engine.recognizer.fuzzy import FuzzyRecognizerSkill, Pattern
from nori_engine.skill.base import Skill, SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import SkillOutput


class RecognizeEverythingSkill(Skill[str]):
    """Matches any input with the best possible score, passing the text along."""

    def __init__(self, skill_info: SkillInfo) -> None:
        super().__init__(skill_info, Specificity.LOW)

    def score(self, ctx: SkillContext, text: str) -> tuple[Score, str]:
        return Score.always_best(), text


YES_EXAMPLES = [
    "yes",
    "yeah",
    "yep",
    "sure",
    "ok",
    "okay",
    "of course",
    "go ahead",
    "go for it",
    "do it",
    "please do",
    "confirm",
    "right",
]

NO_EXAMPLES = [
    "no",
    "nope",
    "nah",
    "no thanks",
    "don't",
    "do not",
    "cancel",
    "stop",
    "never mind",
    "forget it",
]

_YES_NO_PATTERNS: list[Pattern[Any]] = [
    Pattern(name="yes", examples=YES_EXAMPLES, builder=lambda _: True),
    Pattern(name="no", examples=NO_EXAMPLES, builder=lambda _: False),
]


class RecognizeYesNoSkill(FuzzyRecognizerSkill[bool]):
    """Answers a yes/no question asked by a previous output."""

    def __init__(self, skill_info: SkillInfo) -> None:
        super().__init__(skill_info, Specificity.LOW)

    @property
    def patterns(self) -> list[Pattern[Any]]:
        return _YES_NO_PATTERNS

    async def generate_output(self, ctx: SkillContext, input_data: bool) -> SkillOutput:
        return await self.on_answer(ctx, input_data)

    @abstractmethod
    async def on_answer(self, ctx: SkillContext, answer: bool) -> SkillOutput: ...
