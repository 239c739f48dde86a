"""Ranking, dialogue state and evaluation loops."""

from nori_engine.eval.auto_runner import AutoSkillRunner
from nori_engine.eval.evaluator import SkillEvaluator, deny_permissions
from nori_engine.eval.handler import SkillHandler
from nori_engine.eval.interaction import (
    Interaction,
    InteractionLog,
    PendingQuestion,
    QuestionAnswer,
)
from nori_engine.eval.plan import resolve_interaction_plan
from nori_engine.eval.ranker import SkillRanker, SkillWithResult, score_and_wrap

__all__ = [
    "AutoSkillRunner",
    "Interaction",
    "InteractionLog",
    "PendingQuestion",
    "QuestionAnswer",
    "SkillEvaluator",
    "SkillHandler",
    "SkillRanker",
    "SkillWithResult",
    "deny_permissions",
    "resolve_interaction_plan",
    "score_and_wrap",
]
