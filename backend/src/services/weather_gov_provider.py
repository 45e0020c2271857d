"""US National Weather Service (api.weather.gov) provider.

Free and keyless, but US-only. Resolves the nearest observation station for
a point and reads its latest observation.
"""

import os
from datetime import UTC, datetime
from typing import Any

from models.observation import ConditionCode, Observation
from services.errors import UpstreamError
from services.weather_provider import WeatherProvider
from utils.units import (
    celsius_to_fahrenheit,
    degrees_to_compass,
    kmh_to_mph,
    ms_to_mph,
    pa_to_inhg,
)

BASE_URL = "https://api.weather.gov"
DEFAULT_USER_AGENT = "weatherquest (contact@weatherquest.app)"

# Checked in order against the icon URL
ICON_CONDITIONS: list[tuple[tuple[str, ...], ConditionCode]] = [
    (("skc",), ConditionCode.CLEAR),
    (("few", "sct"), ConditionCode.PARTLY_CLOUDY),
    (("bkn", "ovc"), ConditionCode.CLOUDY),
    (("rain", "shra"), ConditionCode.RAIN_MODERATE),
    (("tsra",), ConditionCode.STORM),
    (("snow",), ConditionCode.SNOW_MODERATE),
    (("fog",), ConditionCode.FOG),
]


def icon_to_condition(icon_url: str | None) -> ConditionCode:
    """Map a weather.gov icon URL onto a condition code."""
    if not icon_url:
        return ConditionCode.CLOUDY
    for fragments, condition in ICON_CONDITIONS:
        if any(fragment in icon_url for fragment in fragments):
            return condition
    return ConditionCode.CLOUDY


def _value(properties: dict[str, Any], field: str) -> float | None:
    return (properties.get(field) or {}).get("value")


def _unit(properties: dict[str, Any], field: str) -> str:
    return (properties.get(field) or {}).get("unitCode") or ""


class WeatherGovProvider(WeatherProvider):
    name = "Weather.gov (NWS)"

    def __init__(self, user_agent: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.user_agent = user_agent or os.environ.get(
            "WEATHER_GOV_USER_AGENT", DEFAULT_USER_AGENT
        )

    def fetch(self, latitude: float, longitude: float) -> Observation:
        headers = {"User-Agent": self.user_agent, "Accept": "application/geo+json"}

        point = self._get_json(f"{BASE_URL}/points/{latitude},{longitude}", headers=headers)
        try:
            point_props = point["properties"]
            stations_url = point_props["observationStations"]
        except (KeyError, TypeError):
            raise UpstreamError(self.name, "grid point response missing stations URL")

        stations = self._get_json(stations_url, headers=headers)
        features = (stations or {}).get("features") or []
        if not features:
            raise UpstreamError(self.name, "no observation stations found")
        try:
            station_id = features[0]["properties"]["stationIdentifier"]
        except (KeyError, TypeError):
            raise UpstreamError(self.name, "station feature missing identifier")

        observation = self._get_json(
            f"{BASE_URL}/stations/{station_id}/observations/latest", headers=headers
        )
        try:
            props = observation["properties"]
        except (KeyError, TypeError):
            raise UpstreamError(self.name, "observation response missing properties")

        relative = (point_props.get("relativeLocation") or {}).get("properties") or {}
        location = None
        if relative.get("city"):
            location = f"{relative.get('city')}, {relative.get('state')}"

        return self._to_observation(props, station_id, location)

    def _to_observation(
        self, props: dict[str, Any], station_id: str, location: str | None
    ) -> Observation:
        temp_c = _value(props, "temperature")
        temp_f = celsius_to_fahrenheit(temp_c) if temp_c is not None else None

        wind_speed = _value(props, "windSpeed")
        wind_mph = None
        if wind_speed is not None:
            if "km_h" in _unit(props, "windSpeed"):
                wind_mph = kmh_to_mph(wind_speed)
            else:
                wind_mph = ms_to_mph(wind_speed)

        pressure_pa = _value(props, "barometricPressure")
        humidity = _value(props, "relativeHumidity")
        wind_deg = _value(props, "windDirection")

        heat_index = _value(props, "heatIndex")
        wind_chill = _value(props, "windChill")
        if heat_index is not None:
            real_feel = celsius_to_fahrenheit(heat_index)
        elif wind_chill is not None:
            real_feel = celsius_to_fahrenheit(wind_chill)
        else:
            real_feel = temp_f or 0

        return Observation(
            temperature=temp_f or 0,
            temperature_f=temp_f or 0,
            temperature_c=temp_c or 0,
            humidity=round(humidity) if humidity is not None else 0,
            wind_speed=wind_mph or 0,
            wind_direction=degrees_to_compass(wind_deg) if wind_deg is not None else "N",
            pressure=pa_to_inhg(pressure_pa) if pressure_pa is not None else 30.0,
            real_feel=real_feel,
            cloud_cover=0,  # Not reported by weather.gov
            condition=icon_to_condition(props.get("icon")),
            condition_text=props.get("textDescription") or "Unknown",
            location=location,
            timestamp=props.get("timestamp") or datetime.now(UTC).isoformat(),
            source=self.name,
            station=station_id,
        )
