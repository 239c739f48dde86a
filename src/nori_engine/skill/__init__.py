"""Skill, output and interaction plan contracts."""

from nori_engine.skill.base import AutoRunnable, Permission, Skill, SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import (
    ErrorSkillOutput,
    HeadlineSpeechOutput,
    MissingPermissionsSkillOutput,
    PersistentSkillOutput,
    SkillOutput,
)
from nori_engine.skill.plan import (
    Continue,
    FinishInteraction,
    FinishSubInteraction,
    InteractionPlan,
    ReplaceSubInteraction,
    StartSubInteraction,
)

__all__ = [
    "AutoRunnable",
    "Continue",
    "ErrorSkillOutput",
    "FinishInteraction",
    "FinishSubInteraction",
    "HeadlineSpeechOutput",
    "InteractionPlan",
    "MissingPermissionsSkillOutput",
    "Permission",
    "PersistentSkillOutput",
    "ReplaceSubInteraction",
    "Skill",
    "SkillContext",
    "SkillInfo",
    "SkillOutput",
    "StartSubInteraction",
]
