"""Snapshots of the conversation published by the evaluator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from nori_engine.skill.base import SkillInfo
from nori_engine.skill.output import SkillOutput


class QuestionAnswer(BaseModel):
    """One turn: what the user said (None for turns without input) and the answer."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    question: str | None = None
    answer: SkillOutput


class Interaction(BaseModel):
    """All the turns handled by one skill, or a skill and its sub-dialogues."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    skill: SkillInfo | None = None
    question_answers: list[QuestionAnswer] = Field(default_factory=list)


class PendingQuestion(BaseModel):
    """The utterance being handled right now, shown before the answer is ready."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    user_input: str
    continues_last_interaction: bool
    skill_being_evaluated: SkillInfo | None = None


class InteractionLog(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    interactions: list[Interaction] = Field(default_factory=list)
    pending_question: PendingQuestion | None = None

    def get_last_answer(self) -> SkillOutput | None:
        for interaction in reversed(self.interactions):
            if interaction.question_answers:
                return interaction.question_answers[-1].answer
        return None

    def with_pending_question(self, pending_question: PendingQuestion | None) -> InteractionLog:
        return self.model_copy(update={"pending_question": pending_question})

    def with_answer(self, answer: SkillOutput, *, continues_by_default: bool = False) -> InteractionLog:
        """Close the pending question with answer.

        The turn joins the last interaction if the pending question continued
        it (or, without a pending question, if continues_by_default), and
        starts a new interaction attributed to the evaluated skill otherwise.
        """
        pending = self.pending_question
        continues = (
            pending.continues_last_interaction if pending is not None else continues_by_default
        )
        question_answer = QuestionAnswer(
            question=pending.user_input if pending is not None else None,
            answer=answer,
        )
        interactions = list(self.interactions)
        if continues and interactions:
            last = interactions[-1]
            interactions[-1] = last.model_copy(
                update={"question_answers": [*last.question_answers, question_answer]}
            )
        else:
            skill = pending.skill_being_evaluated if pending is not None else None
            interactions.append(Interaction(skill=skill, question_answers=[question_answer]))
        return InteractionLog(interactions=interactions, pending_question=None)
