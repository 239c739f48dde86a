"""Tells the current time."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from nori_engine.models.score import Specificity
from nori_engine.recognizer.fuzzy import FuzzyRecognizerSkill, Pattern
from nori_engine.skill.base import AutoRunnable, Skill, SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import HeadlineSpeechOutput, SkillOutput

Clock = Callable[[], datetime]


class CurrentTimeOutput(HeadlineSpeechOutput):
    def __init__(self, time_str: str) -> None:
        self.time_str = time_str

    def get_speech_output(self, ctx: SkillContext) -> str:
        return f"It's {self.time_str}"


_TIME_PATTERNS: list[Pattern[Any]] = [
    Pattern(
        name="time",
        examples=[
            "what time is it",
            "what's the time",
            "what time is it now",
            "tell me the time",
            "current time",
        ],
    ),
]


class CurrentTimeSkill(FuzzyRecognizerSkill[str], AutoRunnable):
    auto_update_interval = 60.0

    def __init__(self, skill_info: SkillInfo, clock: Clock = datetime.now) -> None:
        super().__init__(skill_info, Specificity.LOW)
        self.clock = clock

    @property
    def patterns(self) -> list[Pattern[Any]]:
        return _TIME_PATTERNS

    async def generate_output(self, ctx: SkillContext, input_data: str) -> SkillOutput:
        return self._compute_output()

    async def auto_output(self, ctx: SkillContext) -> SkillOutput:
        return self._compute_output()

    def _compute_output(self) -> CurrentTimeOutput:
        return CurrentTimeOutput(self.clock().strftime("%H:%M"))


class CurrentTimeInfo(SkillInfo):
    def __init__(self, clock: Clock = datetime.now) -> None:
        super().__init__("current_time")
        self.clock = clock

    def name(self) -> str:
        return "Current time"

    def sentence_example(self) -> str:
        return "What time is it?"

    def is_available(self, ctx: SkillContext) -> bool:
        return True

    def build(self, ctx: SkillContext) -> Skill:
        return CurrentTimeSkill(self, self.clock)
