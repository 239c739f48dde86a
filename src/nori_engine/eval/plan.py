"""Applies interaction plans to the ranker's batch stack."""

from __future__ import annotations

from nori_engine.eval.ranker import SkillRanker
from nori_engine.skill.plan import (
    Continue,
    FinishInteraction,
    FinishSubInteraction,
    InteractionPlan,
    ReplaceSubInteraction,
    StartSubInteraction,
)


def resolve_interaction_plan(ranker: SkillRanker, plan: InteractionPlan) -> bool:
    """Update the batch stack according to plan.

    Returns whether the microphone should be opened again.
    """
    match plan:
        case FinishInteraction():
            ranker.remove_all_batches()
            return False
        case FinishSubInteraction():
            ranker.remove_top_batch()
            return False
        case Continue():
            return plan.reopen_microphone
        case StartSubInteraction():
            ranker.add_batch_to_top(plan.next_skills)
            return plan.reopen_microphone
        case ReplaceSubInteraction():
            ranker.remove_top_batch()
            ranker.add_batch_to_top(plan.next_skills)
            return plan.reopen_microphone
        case _:
            raise TypeError(f"Unknown interaction plan: {plan!r}")
