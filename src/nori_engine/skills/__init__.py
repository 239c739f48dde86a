"""Bundled skills and the registry listing them."""

from __future__ import annotations

import httpx

from nori_engine.config import AssistantConfig
from nori_engine.skill.base import SkillInfo
from nori_engine.skills.current_date import CurrentDateInfo
from nori_engine.skills.current_time import CurrentTimeInfo
from nori_engine.skills.fallback import TextFallbackInfo, TextFallbackOutput
from nori_engine.skills.telephone import (
    ContactBook,
    Dialer,
    InMemoryContactBook,
    LoggingDialer,
    TelephoneInfo,
)
from nori_engine.skills.weather import WeatherInfo


def all_skill_infos(
    config: AssistantConfig,
    *,
    contact_book: ContactBook | None = None,
    dialer: Dialer | None = None,
    weather_transport: httpx.AsyncBaseTransport | None = None,
) -> list[SkillInfo]:
    """Every bundled skill, in the order they are offered to the ranker."""
    return [
        CurrentTimeInfo(),
        CurrentDateInfo(),
        TelephoneInfo(
            contact_book or InMemoryContactBook(config.contacts),
            dialer or LoggingDialer(),
        ),
        WeatherInfo(config.weather, weather_transport),
    ]


def fallback_skill_info() -> SkillInfo:
    return TextFallbackInfo()


__all__ = [
    "CurrentDateInfo",
    "CurrentTimeInfo",
    "TelephoneInfo",
    "TextFallbackInfo",
    "TextFallbackOutput",
    "WeatherInfo",
    "all_skill_infos",
    "fallback_skill_info",
]
