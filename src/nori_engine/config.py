"""Assistant configuration, loaded from YAML."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_ACCEPTANCE_THRESHOLD = 0.85


class WeatherSettings(BaseModel):
    """OpenWeatherMap access for the weather skill."""

    api_key: str | None = None
    default_city: str = ""
    base_url: str = "https://api.openweathermap.org/data/2.5/weather"
    units: str = "metric"  # "metric", "imperial" or "standard"
    timeout: float = 10.0

    def resolved_api_key(self) -> str | None:
        return self.api_key or os.environ.get("OPENWEATHER_API_KEY")


class AssistantConfig(BaseModel):
    """Everything the dialogue core and the bundled skills can be tuned with."""

    locale: str = "en"
    acceptance_threshold: float = Field(default=DEFAULT_ACCEPTANCE_THRESHOLD, ge=0.0, le=1.0)
    ask_to_repeat: bool = True
    enabled_skills: dict[str, bool] = Field(default_factory=dict)  # missing ids are enabled
    contacts: dict[str, list[str]] = Field(default_factory=dict)  # name -> phone numbers
    weather: WeatherSettings = Field(default_factory=WeatherSettings)

    @classmethod
    def default(cls) -> AssistantConfig:
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> AssistantConfig:
        return cls.model_validate(data)

    @classmethod
    def from_yaml(cls, path: Path) -> AssistantConfig:
        data = yaml.safe_load(path.read_text())
        if data is None:
            return cls.default()
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML mapping")
        return cls.from_dict(data)
