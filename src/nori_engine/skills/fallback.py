"""The skill answering when nothing else understood the user."""

from __future__ import annotations

from nori_engine.skill.base import Skill, SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import HeadlineSpeechOutput, SkillOutput
from nori_engine.skill.plan import Continue, InteractionPlan
from nori_engine.skills.common import RecognizeEverythingSkill


class TextFallbackOutput(HeadlineSpeechOutput):
    def __init__(self, ask_to_repeat: bool) -> None:
        self.ask_to_repeat = ask_to_repeat

    def get_speech_output(self, ctx: SkillContext) -> str:
        if self.ask_to_repeat:
            return "I didn't understand, could you repeat?"
        return "I didn't understand"

    def get_interaction_plan(self, ctx: SkillContext) -> InteractionPlan:
        # Reopening keeps the current batches: the fallback never joins them
        return Continue(reopen_microphone=self.ask_to_repeat)

    def __repr__(self) -> str:
        return f"TextFallbackOutput(ask_to_repeat={self.ask_to_repeat})"


class TextFallbackSkill(RecognizeEverythingSkill):
    async def generate_output(self, ctx: SkillContext, input_data: str) -> SkillOutput:
        # Ask to repeat only if the previous answer did not already do it
        previous = ctx.previous_output
        if isinstance(previous, TextFallbackOutput):
            return TextFallbackOutput(ask_to_repeat=not previous.ask_to_repeat)
        return TextFallbackOutput(ask_to_repeat=True)


class TextFallbackInfo(SkillInfo):
    def __init__(self) -> None:
        super().__init__("text")

    def name(self) -> str:
        return "Text fallback"

    def sentence_example(self) -> str:
        return ""

    def is_available(self, ctx: SkillContext) -> bool:
        return True

    def build(self, ctx: SkillContext) -> Skill:
        return TextFallbackSkill(self)
