"""Tells today's date, or just the month or the year."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from nori_engine.models.score import Specificity
from nori_engine.recognizer.fuzzy import FuzzyRecognizerSkill, Pattern
from nori_engine.skill.base import AutoRunnable, Skill, SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import HeadlineSpeechOutput, SkillOutput
from nori_engine.skills.current_time import Clock


class DateCommand(StrEnum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


class CurrentDateOutput(HeadlineSpeechOutput):
    def __init__(self, command: DateCommand, value: str) -> None:
        self.command = command
        self.value = value

    def get_speech_output(self, ctx: SkillContext) -> str:
        match self.command:
            case DateCommand.DAY:
                return f"Today is {self.value}"
            case DateCommand.MONTH:
                return f"It's {self.value}"
            case DateCommand.YEAR:
                return f"We are in {self.value}"


_DATE_PATTERNS: list[Pattern[Any]] = [
    Pattern(
        name="day",
        examples=["what's the date", "what's today's date", "what day is it", "what day is today"],
        builder=lambda _: DateCommand.DAY,
    ),
    Pattern(
        name="year",
        examples=["what year is it", "what's the year", "which year is it"],
        builder=lambda _: DateCommand.YEAR,
    ),
    Pattern(
        name="month",
        examples=["what month is it", "what's the month", "which month is it"],
        builder=lambda _: DateCommand.MONTH,
    ),
]


def format_day(day: date) -> str:
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


class CurrentDateSkill(FuzzyRecognizerSkill[DateCommand], AutoRunnable):
    auto_update_interval = 60.0

    def __init__(self, skill_info: SkillInfo, clock: Clock = datetime.now) -> None:
        super().__init__(skill_info, Specificity.LOW)
        self.clock = clock

    @property
    def patterns(self) -> list[Pattern[Any]]:
        return _DATE_PATTERNS

    async def generate_output(self, ctx: SkillContext, input_data: DateCommand | None) -> SkillOutput:
        today = self.clock().date()
        match input_data:
            case DateCommand.YEAR:
                return CurrentDateOutput(DateCommand.YEAR, str(today.year))
            case DateCommand.MONTH:
                return CurrentDateOutput(DateCommand.MONTH, f"{today:%B}")
            case _:
                return CurrentDateOutput(DateCommand.DAY, format_day(today))

    async def auto_output(self, ctx: SkillContext) -> SkillOutput:
        # Compact form for widgets
        return CurrentDateOutput(DateCommand.DAY, f"{self.clock():%d.%m.%Y}")


class CurrentDateInfo(SkillInfo):
    def __init__(self, clock: Clock = datetime.now) -> None:
        super().__init__("current_date")
        self.clock = clock

    def name(self) -> str:
        return "Current date"

    def sentence_example(self) -> str:
        return "What's the date today?"

    def is_available(self, ctx: SkillContext) -> bool:
        return True

    def build(self, ctx: SkillContext) -> Skill:
        return CurrentDateSkill(self, self.clock)
