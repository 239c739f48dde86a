"""Skill outputs, including the ones the evaluator produces by itself."""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx

from nori_engine.skill.base import SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.plan import FinishInteraction, InteractionPlan


class SkillOutput(ABC):
    """What a skill answered: something to say, to show, and what comes next."""

    @abstractmethod
    def get_speech_output(self, ctx: SkillContext) -> str:
        """Text to speak. May be blank."""

    def get_interaction_plan(self, ctx: SkillContext) -> InteractionPlan:
        return FinishInteraction()

    @abstractmethod
    def render(self, ctx: SkillContext) -> str:
        """Graphical representation, as plain text."""


class HeadlineSpeechOutput(SkillOutput):
    """An output whose graphical form is just its speech."""

    def render(self, ctx: SkillContext) -> str:
        return self.get_speech_output(ctx)


class PersistentSkillOutput(SkillOutput):
    """Marker for outputs that stay on screen until replaced by another one."""


_NETWORK_ERRORS = (httpx.TransportError, ConnectionError, TimeoutError)


class ErrorSkillOutput(SkillOutput):
    """Shown when evaluation failed.

    from_skill_evaluation tells a failure inside a skill apart from a generic
    one (e.g. the recognizer failing).
    """

    def __init__(self, cause: BaseException, from_skill_evaluation: bool) -> None:
        self.cause = cause
        self.from_skill_evaluation = from_skill_evaluation
        self.is_network_error = isinstance(cause, _NETWORK_ERRORS)

    def get_speech_output(self, ctx: SkillContext) -> str:
        if self.is_network_error:
            return "I couldn't reach the network, please check your connection"
        if self.from_skill_evaluation:
            return "Something went wrong while answering"
        return "Sorry, something went wrong"

    def render(self, ctx: SkillContext) -> str:
        if self.is_network_error:
            return f"Network error\n{self.get_speech_output(ctx)}"
        message = str(self.cause).strip() or type(self.cause).__qualname__
        return f"{self.get_speech_output(ctx)}\n{message}"

    def __repr__(self) -> str:
        return (
            f"ErrorSkillOutput({self.cause!r}, from_skill_evaluation={self.from_skill_evaluation})"
        )


class MissingPermissionsSkillOutput(SkillOutput):
    def __init__(self, skill_info: SkillInfo) -> None:
        self.skill_info = skill_info

    def get_speech_output(self, ctx: SkillContext) -> str:
        permissions = ", ".join(p.value.replace("_", " ") for p in self.skill_info.needed_permissions)
        return f"{self.skill_info.name()} needs these permissions: {permissions}"

    def render(self, ctx: SkillContext) -> str:
        return self.get_speech_output(ctx)
