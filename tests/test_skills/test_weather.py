"""Tests for the weather skill, against a mocked OpenWeatherMap."""

import httpx
import pytest

from nori_engine.config import WeatherSettings
from nori_engine.models.score import ScoreKind
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import PersistentSkillOutput
from nori_engine.skills.weather import (
    CityNotFoundError,
    WeatherClient,
    WeatherFailedOutput,
    WeatherInfo,
    WeatherOutput,
)

CTX = SkillContext()

ROME = {
    "name": "Rome",
    "weather": [{"description": "clear sky"}],
    "main": {"temp": 21.6, "temp_min": 18.2, "temp_max": 24.9},
    "wind": {"speed": 3.14},
}


class _FakeApi:
    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.params["q"].lower() != "rome":
            return httpx.Response(404, json={"cod": "404", "message": "city not found"})
        return httpx.Response(200, json=ROME)


def _make_info(default_city: str = "Rome", api: _FakeApi | None = None) -> tuple[WeatherInfo, _FakeApi]:
    api = api or _FakeApi()
    settings = WeatherSettings(api_key="secret", default_city=default_city)
    return WeatherInfo(settings, httpx.MockTransport(api)), api


class TestAvailability:
    def test_needs_an_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
        assert not WeatherInfo(WeatherSettings()).is_available(CTX)

    def test_key_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENWEATHER_API_KEY", "from-env")
        assert WeatherInfo(WeatherSettings()).is_available(CTX)


class TestRecognition:
    def test_city_is_captured(self) -> None:
        info, _ = _make_info()
        score, city = info.build(CTX).score(CTX, "What's the weather like in New York?")
        assert score.value == 1.0
        assert city == "New York"

    def test_no_city(self) -> None:
        info, _ = _make_info()
        score, city = info.build(CTX).score(CTX, "what's the weather")
        assert score.value == 1.0
        assert city is None

    def test_unrelated(self) -> None:
        info, _ = _make_info()
        score, _ = info.build(CTX).score(CTX, "call mom")
        assert score.kind == ScoreKind.NUMERIC
        assert score.value < 0.85


class TestWeatherSkill:
    @pytest.mark.asyncio
    async def test_weather_in_city(self) -> None:
        info, api = _make_info(default_city="")
        output = await info.build(CTX).generate_output(CTX, "Rome")

        assert isinstance(output, WeatherOutput)
        assert isinstance(output, PersistentSkillOutput)
        assert output.get_speech_output(CTX) == "In Rome there is clear sky, 22 °C"
        assert output.render(CTX) == "Rome\nClear sky, 22°C\nmin 18°C · max 25°C · wind 3.1 m/s"

        params = api.requests[0].url.params
        assert params["appid"] == "secret"
        assert params["units"] == "metric"
        assert params["lang"] == "en"

    @pytest.mark.asyncio
    async def test_default_city(self) -> None:
        info, api = _make_info()
        output = await info.build(CTX).generate_output(CTX, None)
        assert isinstance(output, WeatherOutput)
        assert api.requests[0].url.params["q"] == "Rome"

    @pytest.mark.asyncio
    async def test_unknown_city(self) -> None:
        info, _ = _make_info()
        output = await info.build(CTX).generate_output(CTX, "Atlantis")
        assert isinstance(output, WeatherFailedOutput)
        assert output.get_speech_output(CTX) == "I couldn't find the city Atlantis"

    @pytest.mark.asyncio
    async def test_no_city_and_no_default(self) -> None:
        info, api = _make_info(default_city="  ")
        output = await info.build(CTX).generate_output(CTX, None)
        assert isinstance(output, WeatherFailedOutput)
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_auto_output_uses_default_city(self) -> None:
        info, _ = _make_info()
        output = await info.build(CTX).auto_output(CTX)
        assert isinstance(output, WeatherOutput)
        assert output.city == "Rome"


class TestWeatherClient:
    @pytest.mark.asyncio
    async def test_results_are_cached(self) -> None:
        api = _FakeApi()
        client = WeatherClient(WeatherSettings(api_key="k"), httpx.MockTransport(api))

        first = await client.get_weather("Rome", "en")
        second = await client.get_weather("rome", "en")

        assert first == second == ROME
        assert len(api.requests) == 1

    @pytest.mark.asyncio
    async def test_language_is_part_of_the_cache_key(self) -> None:
        api = _FakeApi()
        client = WeatherClient(WeatherSettings(api_key="k"), httpx.MockTransport(api))
        await client.get_weather("Rome", "en")
        await client.get_weather("Rome", "it")
        assert len(api.requests) == 2

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        client = WeatherClient(WeatherSettings(api_key="k"), httpx.MockTransport(_FakeApi()))
        with pytest.raises(CityNotFoundError):
            await client.get_weather("Atlantis", "en")

    @pytest.mark.asyncio
    async def test_server_errors_propagate(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        client = WeatherClient(WeatherSettings(api_key="k"), transport)
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_weather("Rome", "en")
