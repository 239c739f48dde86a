"""Periodic refresh of auto-runnable skills."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from nori_engine.eval.handler import SkillHandler
from nori_engine.skill.base import AutoRunnable, SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import SkillOutput
from nori_engine.state import StateFlow

logger = logging.getLogger(__name__)


class AutoSkillRunner:
    """Runs one refresh loop per enabled AutoRunnable skill.

    Outputs are published on outputs, keyed by skill id. Whenever the enabled
    skill set changes, every loop is cancelled and awaited and the outputs are
    cleared before the new loops start.
    """

    def __init__(self, skill_handler: SkillHandler, skill_context: SkillContext) -> None:
        self._handler = skill_handler
        self._ctx = skill_context
        self._outputs: StateFlow[dict[str, SkillOutput]] = StateFlow({})
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._watcher: asyncio.Task[None] | None = None
        self._restart_lock = asyncio.Lock()

    @property
    def outputs(self) -> StateFlow[dict[str, SkillOutput]]:
        return self._outputs

    @property
    def running_skill_ids(self) -> list[str]:
        return list(self._tasks)

    def start(self) -> None:
        """Follow the enabled skill set of the handler, restarting on every change."""
        if self._watcher is None:
            self._watcher = asyncio.get_running_loop().create_task(self._watch())

    async def _watch(self) -> None:
        async for infos in self._handler.enabled_skills_info.subscribe():
            if infos is not None:
                await self.restart(infos)

    async def restart(self, infos: Sequence[SkillInfo]) -> None:
        # One restart at a time: the task map is emptied and refilled as a unit
        async with self._restart_lock:
            await self._cancel_tasks()
            self._outputs.value = {}

            for info in infos:
                skill = info.build(self._ctx)
                if isinstance(skill, AutoRunnable):
                    self._tasks[info.id] = asyncio.get_running_loop().create_task(
                        self._run(info.id, skill), name=f"auto-{info.id}"
                    )
            logger.info("Auto-runnable skills running: %s", self.running_skill_ids)

    async def _run(self, skill_id: str, skill: AutoRunnable) -> None:
        while True:
            try:
                output = await skill.auto_output(self._ctx)
                self._outputs.value = {**self._outputs.value, skill_id: output}
            except Exception:
                logger.exception("Auto output of %s failed", skill_id)
            await asyncio.sleep(skill.auto_update_interval)

    async def _cancel_tasks(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    async def aclose(self) -> None:
        if self._watcher is not None:
            self._watcher.cancel()
            await asyncio.gather(self._watcher, return_exceptions=True)
            self._watcher = None
        async with self._restart_lock:
            await self._cancel_tasks()
