"""Interaction plans: what a skill output wants to happen next.

    FinishInteraction        -> the dialogue is over, drop every sub-dialogue
    FinishSubInteraction     -> the current sub-dialogue is over
    Continue                 -> keep the current candidates
    StartSubInteraction      -> narrow the next turn to next_skills
    ReplaceSubInteraction    -> swap the current sub-dialogue for next_skills
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from nori_engine.skill.base import Skill


class InteractionPlan(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    reopen_microphone: bool = False


class FinishInteraction(InteractionPlan):
    pass


class FinishSubInteraction(InteractionPlan):
    pass


class Continue(InteractionPlan):
    pass


class StartSubInteraction(InteractionPlan):
    next_skills: list[Skill]


class ReplaceSubInteraction(InteractionPlan):
    next_skills: list[Skill]
