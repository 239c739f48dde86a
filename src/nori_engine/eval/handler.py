"""Keeps track of the enabled skills and of the ranker built from them."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from nori_engine.eval.ranker import SkillRanker
from nori_engine.skill.base import SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.state import StateFlow

logger = logging.getLogger(__name__)


class SkillHandler:
    """Source of the enabled skill set.

    enabled_skills_info publishes the enabled SkillInfos every time the set
    actually changes; skill_ranker is rebuilt at the same moment.
    """

    def __init__(
        self,
        skill_context: SkillContext,
        all_skill_infos: Sequence[SkillInfo],
        fallback_skill_info: SkillInfo,
        acceptance_threshold: float | None = None,
    ) -> None:
        self._ctx = skill_context
        self.all_skill_infos = list(all_skill_infos)
        self.fallback_skill_info = fallback_skill_info
        self.acceptance_threshold = (
            acceptance_threshold
            if acceptance_threshold is not None
            else skill_context.config.acceptance_threshold
        )
        self.enabled_skills_info: StateFlow[list[SkillInfo] | None] = StateFlow(None)
        self._skill_ranker: SkillRanker | None = None

    @property
    def skill_context(self) -> SkillContext:
        return self._ctx

    @property
    def skill_ranker(self) -> SkillRanker:
        if self._skill_ranker is None:
            return self.apply_settings(self._ctx.config.enabled_skills)
        return self._skill_ranker

    def apply_settings(
        self, enabled_skills: Mapping[str, bool], locale: str | None = None
    ) -> SkillRanker:
        """Recompute the enabled skills; skills missing from enabled_skills are on."""
        locale_changed = locale is not None and locale != self._ctx.locale
        if locale is not None:
            self._ctx.locale = locale

        enabled = [
            info
            for info in self.all_skill_infos
            if enabled_skills.get(info.id, True) and info.is_available(self._ctx)
        ]
        ranker = self._skill_ranker
        if ranker is not None and not locale_changed and enabled == self.enabled_skills_info.value:
            return ranker

        logger.debug("Enabled skills: %s", [info.id for info in enabled])
        ranker = SkillRanker(
            [info.build(self._ctx) for info in enabled],
            self.fallback_skill_info.build(self._ctx),
            self.acceptance_threshold,
        )
        self._skill_ranker = ranker
        self.enabled_skills_info.value = enabled
        return ranker

    def skill_info_by_id(self, skill_id: str) -> SkillInfo | None:
        for info in [*self.all_skill_infos, self.fallback_skill_info]:
            if info.id == skill_id:
                return info
        return None
