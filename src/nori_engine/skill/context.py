"""The environment handed to every skill call."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nori_engine.config import AssistantConfig
from nori_engine.io.speech import NothingSpeechDevice, SpeechOutputDevice

if TYPE_CHECKING:
    from nori_engine.skill.output import SkillOutput


class SkillContext:
    """Access to locale, configuration and devices for skills.

    previous_output is the last output of the interaction in progress, or
    None. Only the evaluator sets it.
    """

    def __init__(
        self,
        *,
        config: AssistantConfig | None = None,
        speech_output_device: SpeechOutputDevice | None = None,
        locale: str | None = None,
    ) -> None:
        self.config = config or AssistantConfig.default()
        self.speech_output_device = speech_output_device or NothingSpeechDevice()
        self.locale = locale or self.config.locale
        self.previous_output: SkillOutput | None = None

    @property
    def sentences_language(self) -> str:
        return self.locale.replace("_", "-").split("-")[0].lower()
