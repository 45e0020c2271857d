"""AccuWeather provider. Requires ACCUWEATHER_API_KEY."""

import logging
import os
from typing import Any

from models.observation import ConditionCode, Observation
from services.errors import UpstreamError
from services.weather_provider import WeatherProvider
from utils.cache import get_location_key_cache, location_cache_key

logger = logging.getLogger(__name__)

BASE_URL = "https://dataservice.accuweather.com"

_C = ConditionCode
ICON_CONDITIONS: dict[int, ConditionCode] = {
    1: _C.CLEAR, 2: _C.CLEAR, 3: _C.PARTLY_CLOUDY, 4: _C.PARTLY_CLOUDY,
    5: _C.PARTLY_CLOUDY, 6: _C.CLOUDY, 7: _C.CLOUDY, 8: _C.CLOUDY,
    11: _C.FOG, 12: _C.RAIN_LIGHT, 13: _C.RAIN_LIGHT, 14: _C.RAIN_MODERATE,
    15: _C.STORM, 16: _C.STORM, 17: _C.STORM, 18: _C.RAIN_MODERATE,
    19: _C.SNOW_LIGHT, 20: _C.SNOW_LIGHT, 21: _C.SNOW_LIGHT, 22: _C.SNOW_MODERATE,
    23: _C.SNOW_MODERATE, 24: _C.SNOW_MODERATE, 25: _C.SNOW_MODERATE, 26: _C.RAIN_HEAVY,
    29: _C.RAIN_MODERATE, 31: _C.SNOW_MODERATE, 32: _C.CLEAR, 33: _C.CLEAR,
    34: _C.PARTLY_CLOUDY, 35: _C.PARTLY_CLOUDY, 36: _C.PARTLY_CLOUDY, 37: _C.FOG,
    38: _C.CLOUDY, 39: _C.RAIN_LIGHT, 40: _C.RAIN_MODERATE, 41: _C.STORM,
    42: _C.STORM, 43: _C.SNOW_LIGHT, 44: _C.SNOW_MODERATE,
}  # fmt: skip


def icon_to_condition(icon: int | None) -> ConditionCode:
    """Map an AccuWeather icon number onto a condition code."""
    return ICON_CONDITIONS.get(icon, ConditionCode.CLOUDY)


class AccuWeatherProvider(WeatherProvider):
    name = "AccuWeather"

    def __init__(self, api_key: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else os.environ.get(
            "ACCUWEATHER_API_KEY", ""
        )

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_location_key(self, latitude: float, longitude: float) -> str:
        """Resolve a coordinate to an AccuWeather location key (cached 1h)."""
        cache = get_location_key_cache()
        cache_key = location_cache_key(latitude, longitude)
        if cache_key in cache:
            return cache[cache_key]

        data = self._get_json(
            f"{BASE_URL}/locations/v1/cities/geoposition/search",
            params={"apikey": self.api_key, "q": f"{latitude},{longitude}"},
        )
        key = (data or {}).get("Key")
        if not key:
            raise UpstreamError(self.name, "geoposition search returned no location key")

        cache[cache_key] = key
        return key

    def fetch(self, latitude: float, longitude: float) -> Observation:
        location_key = self.get_location_key(latitude, longitude)
        data = self._get_json(
            f"{BASE_URL}/currentconditions/v1/{location_key}",
            params={"apikey": self.api_key, "details": "true"},
        )
        if not data:
            raise UpstreamError(self.name, "empty current conditions response")

        try:
            return self._to_observation(data[0])
        except (KeyError, TypeError, IndexError) as e:
            raise UpstreamError(self.name, f"unexpected response format: missing {e}")

    def _to_observation(self, current: dict[str, Any]) -> Observation:
        temp_f = current["Temperature"]["Imperial"]["Value"]
        return Observation(
            temperature=temp_f,
            temperature_f=temp_f,
            temperature_c=current["Temperature"]["Metric"]["Value"],
            humidity=current.get("RelativeHumidity") or 0,
            wind_speed=current["Wind"]["Speed"]["Imperial"]["Value"],
            wind_direction=current["Wind"]["Direction"]["English"],
            pressure=current["Pressure"]["Imperial"]["Value"],
            real_feel=current["RealFeelTemperature"]["Imperial"]["Value"],
            cloud_cover=current.get("CloudCover") or 0,
            condition=icon_to_condition(current.get("WeatherIcon")),
            condition_text=current.get("WeatherText") or "Unknown",
            timestamp=current["LocalObservationDateTime"],
            source=self.name,
        )
