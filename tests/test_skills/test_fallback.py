"""Tests for the fallback skill and the shared recognizers."""

import pytest

from nori_engine.models.score import ScoreKind
from nori_engine.skill.context import SkillContext
from nori_engine.skill.plan import Continue
from nori_engine.skills.common import RecognizeYesNoSkill
from nori_engine.skills.current_time import CurrentTimeOutput
from nori_engine.skills.fallback import TextFallbackInfo, TextFallbackOutput


class TestTextFallback:
    def test_understands_everything(self) -> None:
        ctx = SkillContext()
        skill = TextFallbackInfo().build(ctx)
        score, data = skill.score(ctx, "gibberish words")
        assert score.kind == ScoreKind.ALWAYS_BEST
        assert data == "gibberish words"

    @pytest.mark.asyncio
    async def test_asks_to_repeat_first(self) -> None:
        ctx = SkillContext()
        output = await TextFallbackInfo().build(ctx).generate_output(ctx, "x")

        assert isinstance(output, TextFallbackOutput)
        assert output.get_speech_output(ctx) == "I didn't understand, could you repeat?"
        plan = output.get_interaction_plan(ctx)
        assert isinstance(plan, Continue)
        assert plan.reopen_microphone is True

    @pytest.mark.asyncio
    async def test_alternates_after_another_fallback(self) -> None:
        ctx = SkillContext()
        skill = TextFallbackInfo().build(ctx)

        ctx.previous_output = TextFallbackOutput(ask_to_repeat=True)
        second = await skill.generate_output(ctx, "x")
        assert second.ask_to_repeat is False
        assert second.get_speech_output(ctx) == "I didn't understand"
        assert second.get_interaction_plan(ctx).reopen_microphone is False

        ctx.previous_output = second
        third = await skill.generate_output(ctx, "x")
        assert third.ask_to_repeat is True

    @pytest.mark.asyncio
    async def test_other_previous_outputs_do_not_count(self) -> None:
        ctx = SkillContext()
        ctx.previous_output = CurrentTimeOutput("10:00")
        output = await TextFallbackInfo().build(ctx).generate_output(ctx, "x")
        assert output.ask_to_repeat is True


class _Answer(RecognizeYesNoSkill):
    async def on_answer(self, ctx: SkillContext, answer: bool) -> CurrentTimeOutput:
        return CurrentTimeOutput("yes" if answer else "no")


class TestYesNo:
    @pytest.mark.parametrize(
        "text, expected",
        [("Yes!", True), ("of course", True), ("No.", False), ("never mind", False)],
    )
    def test_answers(self, text: str, expected: bool) -> None:
        ctx = SkillContext()
        score, answer = _Answer(TextFallbackInfo()).score(ctx, text)
        assert score.value == 1.0
        assert answer is expected

    @pytest.mark.asyncio
    async def test_generate_output_delegates_to_on_answer(self) -> None:
        ctx = SkillContext()
        output = await _Answer(TextFallbackInfo()).generate_output(ctx, False)
        assert output.time_str == "no"
