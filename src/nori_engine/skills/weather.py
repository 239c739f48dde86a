"""Current weather from OpenWeatherMap."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from nori_engine.config import WeatherSettings
from nori_engine.models.score import Specificity
from nori_engine.recognizer.fuzzy import Capture, FuzzyRecognizerSkill, Pattern
from nori_engine.skill.base import AutoRunnable, Skill, SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import HeadlineSpeechOutput, PersistentSkillOutput, SkillOutput

logger = logging.getLogger(__name__)

REFRESH_SECONDS = 30 * 60

_UNIT_SYMBOLS = {"metric": "°C", "imperial": "°F", "standard": "K"}
_SPEED_UNITS = {"metric": "m/s", "imperial": "mph", "standard": "m/s"}


class CityNotFoundError(Exception):
    def __init__(self, city: str) -> None:
        super().__init__(f"City not found: {city}")
        self.city = city


class WeatherClient:
    """Fetches current weather JSON, caching each city for REFRESH_SECONDS."""

    def __init__(
        self,
        settings: WeatherSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._cache: dict[str, tuple[dict[str, Any], float]] = {}

    async def get_weather(self, city: str, lang: str) -> dict[str, Any]:
        key = f"{city.lower()}|{lang}"
        cached = self._cache.get(key)
        if cached is not None and time.monotonic() - cached[1] < REFRESH_SECONDS:
            logger.debug("Weather for %s from cache", city)
            return cached[0]

        data = await self._fetch(city, lang)
        self._cache[key] = (data, time.monotonic())
        return data

    async def _fetch(self, city: str, lang: str) -> dict[str, Any]:
        params = {
            "q": city,
            "appid": self._settings.resolved_api_key() or "",
            "units": self._settings.units,
            "lang": lang,
        }
        async with httpx.AsyncClient(
            timeout=self._settings.timeout,
            transport=self._transport,
            headers={"User-Agent": "Nori-Dialogue-Engine/0.1"},
        ) as client:
            resp = await client.get(self._settings.base_url, params=params)
        if resp.status_code == 404:
            raise CityNotFoundError(city)
        resp.raise_for_status()
        return resp.json()


class WeatherOutput(PersistentSkillOutput):
    def __init__(
        self,
        city: str,
        description: str,
        temp: float,
        temp_min: float,
        temp_max: float,
        wind_speed: float,
        units: str = "metric",
    ) -> None:
        self.city = city
        self.description = description
        self.temp = temp
        self.temp_min = temp_min
        self.temp_max = temp_max
        self.wind_speed = wind_speed
        self.units = units

    @classmethod
    def from_json(cls, data: dict[str, Any], units: str = "metric") -> WeatherOutput:
        main = data["main"]
        description = data["weather"][0]["description"]
        return cls(
            city=data["name"],
            description=description[:1].upper() + description[1:],
            temp=main["temp"],
            temp_min=main["temp_min"],
            temp_max=main["temp_max"],
            wind_speed=data.get("wind", {}).get("speed", 0.0),
            units=units,
        )

    @classmethod
    def failed(cls, city: str) -> WeatherFailedOutput:
        return WeatherFailedOutput(city)

    @property
    def unit_symbol(self) -> str:
        return _UNIT_SYMBOLS.get(self.units, "°C")

    def get_speech_output(self, ctx: SkillContext) -> str:
        return (
            f"In {self.city} there is {self.description.lower()}, "
            f"{round(self.temp)} {self.unit_symbol}"
        )

    def render(self, ctx: SkillContext) -> str:
        speed_unit = _SPEED_UNITS.get(self.units, "m/s")
        return (
            f"{self.city}\n"
            f"{self.description}, {round(self.temp)}{self.unit_symbol}\n"
            f"min {round(self.temp_min)}{self.unit_symbol} · "
            f"max {round(self.temp_max)}{self.unit_symbol} · "
            f"wind {self.wind_speed:.1f} {speed_unit}"
        )


class WeatherFailedOutput(HeadlineSpeechOutput):
    def __init__(self, city: str) -> None:
        self.city = city

    def get_speech_output(self, ctx: SkillContext) -> str:
        if not self.city:
            return "Which city? No default city is configured"
        return f"I couldn't find the city {self.city}"


def _city(capture: Capture | None) -> str | None:
    if capture is None:
        return None
    return (capture.group("city") or "").strip() or None


_WEATHER_PATTERNS: list[Pattern[Any]] = [
    Pattern(
        name="current",
        examples=["what's the weather", "what's the weather like", "how is the weather", "weather today"],
        builder=_city,
    ),
    Pattern(
        name="in_city",
        examples=["what's the weather in london", "how is the weather in paris", "weather in rome"],
        expression=r"\bweather(?: like)? (?:in|at|for) (?P<city>.+)",
        builder=_city,
    ),
]


class WeatherSkill(FuzzyRecognizerSkill[str | None], AutoRunnable):
    auto_update_interval = float(REFRESH_SECONDS)

    def __init__(self, skill_info: SkillInfo, client: WeatherClient, settings: WeatherSettings) -> None:
        super().__init__(skill_info, Specificity.LOW)
        self.client = client
        self.settings = settings

    @property
    def patterns(self) -> list[Pattern[Any]]:
        return _WEATHER_PATTERNS

    async def generate_output(self, ctx: SkillContext, input_data: str | None) -> SkillOutput:
        city = input_data or self.settings.default_city.strip()
        if not city:
            return WeatherOutput.failed("")

        try:
            data = await self.client.get_weather(city, ctx.sentences_language)
        except CityNotFoundError:
            logger.warning("Could not find city %s", city)
            return WeatherOutput.failed(city)
        return WeatherOutput.from_json(data, self.settings.units)

    async def auto_output(self, ctx: SkillContext) -> SkillOutput:
        return await self.generate_output(ctx, None)


class WeatherInfo(SkillInfo):
    def __init__(self, settings: WeatherSettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        super().__init__("weather")
        self.settings = settings
        self.client = WeatherClient(settings, transport)

    def name(self) -> str:
        return "Weather"

    def sentence_example(self) -> str:
        return "What's the weather in London?"

    def is_available(self, ctx: SkillContext) -> bool:
        return self.settings.resolved_api_key() is not None

    def build(self, ctx: SkillContext) -> Skill:
        return WeatherSkill(self, self.client, self.settings)
