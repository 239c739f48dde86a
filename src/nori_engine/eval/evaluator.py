"""The evaluation loop: from input events to skill outputs and back to listening."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from nori_engine.eval.handler import SkillHandler
from nori_engine.eval.interaction import InteractionLog, PendingQuestion
from nori_engine.eval.plan import resolve_interaction_plan
from nori_engine.eval.ranker import SkillRanker, SkillWithResult
from nori_engine.io.stt import SttInputDevice
from nori_engine.models.events import Error, Final, InputEvent, NoInput, Partial
from nori_engine.skill.base import Permission, SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import ErrorSkillOutput, MissingPermissionsSkillOutput, SkillOutput
from nori_engine.skills.fallback import TextFallbackOutput
from nori_engine.state import StateFlow

logger = logging.getLogger(__name__)

PermissionRequester = Callable[[Sequence[Permission]], Awaitable[bool]]


async def deny_permissions(permissions: Sequence[Permission]) -> bool:
    return False


class SkillEvaluator:
    """Turns input events into interactions.

    Every event updates the InteractionLog published on state. Final events
    are handled one at a time: the chosen skill generates its output, the
    output's plan updates the ranker's batch stack, the answer is spoken and,
    if the plan asks for it, the microphone is opened again once speaking ends.
    """

    def __init__(
        self,
        skill_context: SkillContext,
        skill_handler: SkillHandler,
        stt_input_device: SttInputDevice,
        permission_requester: PermissionRequester | None = None,
    ) -> None:
        self._ctx = skill_context
        self._handler = skill_handler
        self._stt = stt_input_device
        self.permission_requester: PermissionRequester = permission_requester or deny_permissions
        self._state: StateFlow[InteractionLog] = StateFlow(InteractionLog())
        self._turn_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> StateFlow[InteractionLog]:
        return self._state

    @property
    def _ranker(self) -> SkillRanker:
        return self._handler.skill_ranker

    def process_input_event(self, event: InputEvent, ask_to_repeat: bool | None = None) -> None:
        """Schedule handling of event on the running loop and return immediately."""
        task = asyncio.get_running_loop().create_task(
            self.handle_input_event(event, ask_to_repeat)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def join(self) -> None:
        """Wait until every scheduled event, including ones scheduled meanwhile, is handled."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def aclose(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

    async def handle_input_event(self, event: InputEvent, ask_to_repeat: bool | None = None) -> None:
        if ask_to_repeat is None:
            ask_to_repeat = self._ctx.config.ask_to_repeat

        match event:
            case Error():
                logger.error("Speech recognition failed: %s", event.cause)
                self._add_interaction_from_pending(
                    ErrorSkillOutput(event.cause, from_skill_evaluation=False)
                )
            case Final():
                async with self._turn_lock:
                    self._set_pending_question(event.utterances[0][0])
                    await self._evaluate_matching_skill(
                        [text for text, _ in event.utterances], ask_to_repeat
                    )
            case NoInput():
                self._state.value = self._state.value.with_pending_question(None)
            case Partial():
                self._set_pending_question(event.utterance)
            case _:
                raise TypeError(f"Unknown input event: {event!r}")

    async def _evaluate_matching_skill(self, utterances: list[str], ask_to_repeat: bool) -> None:
        ranker = self._ranker
        try:
            chosen_input, chosen = self._choose_skill(ranker, utterances)
        except Exception as e:
            logger.exception("Ranking failed for %r", utterances)
            self._add_interaction_from_pending(ErrorSkillOutput(e, from_skill_evaluation=True))
            return

        skill_info = chosen.skill.skill_info
        self._set_pending_question(chosen_input, skill_info)

        try:
            permissions = skill_info.needed_permissions
            if permissions and not await self.permission_requester(list(permissions)):
                self._add_interaction_from_pending(MissingPermissionsSkillOutput(skill_info))
                return

            self._ctx.previous_output = self._state.value.get_last_answer()
            if not ask_to_repeat:
                # Makes the fallback believe it already asked, so it won't ask again
                self._ctx.previous_output = TextFallbackOutput(ask_to_repeat=True)

            output = await chosen.generate_output(self._ctx)
            speech = output.get_speech_output(self._ctx)
            plan = output.get_interaction_plan(self._ctx)
            reopen_microphone = resolve_interaction_plan(ranker, plan)
            self._add_interaction_from_pending(output)

            if speech.strip():
                self._ctx.speech_output_device.speak(speech)

            if reopen_microphone:
                self._ctx.speech_output_device.run_when_finished_speaking(
                    lambda: self._stt.try_load(self.process_input_event)
                )
        except Exception as e:
            logger.exception("Error while evaluating %s", skill_info.id)
            self._add_interaction_from_pending(ErrorSkillOutput(e, from_skill_evaluation=True))

    def _choose_skill(
        self, ranker: SkillRanker, utterances: list[str]
    ) -> tuple[str, SkillWithResult]:
        for text in utterances:
            best = ranker.get_best(self._ctx, text)
            if best is not None:
                return text, best
        return utterances[0], ranker.get_fallback_skill(self._ctx, utterances[0])

    def _set_pending_question(self, user_input: str, skill_info: SkillInfo | None = None) -> None:
        self._state.value = self._state.value.with_pending_question(
            PendingQuestion(
                user_input=user_input,
                continues_last_interaction=self._ranker.has_any_batches(),
                skill_being_evaluated=skill_info,
            )
        )

    def _add_interaction_from_pending(self, output: SkillOutput) -> None:
        self._state.value = self._state.value.with_answer(
            output, continues_by_default=self._ranker.has_any_batches()
        )
