"""OpenWeatherMap provider, used when AccuWeather fails."""

import os
from datetime import UTC, datetime
from typing import Any

from models.observation import ConditionCode, Observation
from services.errors import UpstreamError
from services.weather_provider import WeatherProvider
from utils.units import degrees_to_compass, fahrenheit_to_celsius, hpa_to_inhg

BASE_URL = "https://api.openweathermap.org/data/2.5"


def weather_id_to_condition(weather_id: int | None) -> ConditionCode:
    """Map an OpenWeatherMap condition id onto a condition code."""
    if weather_id is None:
        return ConditionCode.CLOUDY
    if 200 <= weather_id < 300:
        return ConditionCode.STORM
    if 300 <= weather_id < 400:
        return ConditionCode.RAIN_LIGHT
    if 500 <= weather_id < 505:
        return ConditionCode.RAIN_MODERATE
    if 505 <= weather_id < 600:
        return ConditionCode.RAIN_HEAVY
    if 600 <= weather_id < 700:
        return ConditionCode.SNOW_MODERATE
    if 700 <= weather_id < 800:
        return ConditionCode.FOG
    if weather_id == 800:
        return ConditionCode.CLEAR
    if weather_id in (801, 802):
        return ConditionCode.PARTLY_CLOUDY
    return ConditionCode.CLOUDY


class OpenWeatherProvider(WeatherProvider):
    name = "OpenWeatherMap"
    fallback_for = "AccuWeather"

    def __init__(self, api_key: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else os.environ.get(
            "OPENWEATHER_API_KEY", ""
        )

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def fetch(self, latitude: float, longitude: float) -> Observation:
        data = self._get_json(
            f"{BASE_URL}/weather",
            params={
                "lat": latitude,
                "lon": longitude,
                "appid": self.api_key,
                "units": "imperial",
            },
        )
        try:
            return self._to_observation(data)
        except (KeyError, TypeError, IndexError) as e:
            raise UpstreamError(self.name, f"unexpected response format: missing {e}")

    def _to_observation(self, data: dict[str, Any]) -> Observation:
        main = data["main"]
        weather = data["weather"][0]
        wind = data.get("wind") or {}
        temp_f = round(main["temp"])

        return Observation(
            temperature=temp_f,
            temperature_f=temp_f,
            temperature_c=fahrenheit_to_celsius(main["temp"]),
            humidity=main.get("humidity") or 0,
            wind_speed=round(wind.get("speed") or 0),
            wind_direction=degrees_to_compass(wind.get("deg") or 0),
            pressure=hpa_to_inhg(main["pressure"]),
            real_feel=round(main.get("feels_like", main["temp"])),
            cloud_cover=(data.get("clouds") or {}).get("all") or 0,
            condition=weather_id_to_condition(weather.get("id")),
            condition_text=(weather.get("description") or "unknown").title(),
            location=data.get("name"),
            timestamp=datetime.now(UTC).isoformat(),
            source=self.name,
        )
