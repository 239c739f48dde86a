"""Skill contracts.

A SkillInfo is the static description of a skill (id, name, permissions) and
the factory for Skill instances. A Skill scores utterances and turns the data
it extracted into a SkillOutput. Skills that can also refresh themselves on a
timer implement AutoRunnable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, Generic, TypeVar

from nori_engine.models.score import Score, Specificity

if TYPE_CHECKING:
    from nori_engine.skill.context import SkillContext
    from nori_engine.skill.output import SkillOutput

InputData = TypeVar("InputData")


class Permission(StrEnum):
    READ_CONTACTS = "read_contacts"
    CALL_PHONE = "call_phone"


class SkillInfo(ABC):
    """Static metadata of a skill and the factory that builds it."""

    needed_permissions: tuple[Permission, ...] = ()

    def __init__(self, skill_id: str) -> None:
        self.id = skill_id

    @abstractmethod
    def name(self) -> str:
        """Human readable skill name."""

    @abstractmethod
    def sentence_example(self) -> str:
        """An utterance the skill understands, shown to the user."""

    @abstractmethod
    def is_available(self, ctx: SkillContext) -> bool:
        """Whether the skill can run in the current environment."""

    @abstractmethod
    def build(self, ctx: SkillContext) -> Skill:
        """Create a fresh Skill instance."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class Skill(ABC, Generic[InputData]):
    """Scores user input and generates the corresponding output."""

    def __init__(self, skill_info: SkillInfo, specificity: Specificity) -> None:
        self.skill_info = skill_info
        self.specificity = specificity

    @abstractmethod
    def score(self, ctx: SkillContext, text: str) -> tuple[Score, InputData]:
        """Match text against this skill.

        Returns the Score and whatever data generate_output() will need.
        Must be pure: the ranker may call it on skills that are never chosen.
        """

    @abstractmethod
    async def generate_output(self, ctx: SkillContext, input_data: InputData) -> SkillOutput:
        """Produce the output for data previously returned by score()."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.skill_info.id}, {self.specificity.name})"


class AutoRunnable(ABC):
    """A skill that can produce output on its own, on a fixed interval."""

    # Seconds between two consecutive auto_output() calls
    auto_update_interval: float = 60.0

    @abstractmethod
    async def auto_output(self, ctx: SkillContext) -> SkillOutput:
        """Produce an up-to-date output without any user input."""
