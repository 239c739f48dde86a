"""Tests for loading the assistant configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nori_engine.config import DEFAULT_ACCEPTANCE_THRESHOLD, AssistantConfig, WeatherSettings


class TestAssistantConfig:
    def test_defaults(self) -> None:
        config = AssistantConfig.default()
        assert config.locale == "en"
        assert config.acceptance_threshold == DEFAULT_ACCEPTANCE_THRESHOLD
        assert config.ask_to_repeat is True
        assert config.enabled_skills == {}
        assert config.contacts == {}
        assert config.weather.units == "metric"

    def test_from_dict(self) -> None:
        config = AssistantConfig.from_dict(
            {
                "locale": "it",
                "acceptance_threshold": 0.0,
                "enabled_skills": {"weather": False},
                "contacts": {"Mom": ["555-0303"]},
                "weather": {"api_key": "k", "default_city": "Rome"},
            }
        )
        assert config.locale == "it"
        assert config.acceptance_threshold == 0.0
        assert config.enabled_skills == {"weather": False}
        assert config.contacts == {"Mom": ["555-0303"]}
        assert config.weather.default_city == "Rome"

    def test_threshold_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            AssistantConfig.from_dict({"acceptance_threshold": 1.5})

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "nori.yaml"
        path.write_text(
            "locale: en\n"
            "ask_to_repeat: false\n"
            "contacts:\n"
            "  Michael Smith: ['555-0101', '555-0102']\n"
        )
        config = AssistantConfig.from_yaml(path)
        assert config.ask_to_repeat is False
        assert config.contacts["Michael Smith"] == ["555-0101", "555-0102"]

    def test_empty_yaml_is_default(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert AssistantConfig.from_yaml(path) == AssistantConfig.default()

    def test_yaml_must_be_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="must contain a YAML mapping"):
            AssistantConfig.from_yaml(path)


class TestWeatherSettings:
    def test_explicit_key_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENWEATHER_API_KEY", "env")
        assert WeatherSettings(api_key="explicit").resolved_api_key() == "explicit"

    def test_environment_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENWEATHER_API_KEY", "env")
        assert WeatherSettings().resolved_api_key() == "env"

    def test_no_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
        assert WeatherSettings().resolved_api_key() is None
