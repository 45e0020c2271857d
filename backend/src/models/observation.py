"""Normalized weather observation models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ConditionCode(str, Enum):
    """Normalized weather states shared by every provider and report."""

    CLEAR = "clear"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    RAIN_LIGHT = "rain_light"
    RAIN_MODERATE = "rain_moderate"
    RAIN_HEAVY = "rain_heavy"
    STORM = "storm"
    FOG = "fog"
    SNOW_LIGHT = "snow_light"
    SNOW_MODERATE = "snow_moderate"


RAIN_CONDITIONS = frozenset(
    {ConditionCode.RAIN_LIGHT, ConditionCode.RAIN_MODERATE, ConditionCode.RAIN_HEAVY}
)


class Observation(BaseModel):
    """Current conditions at a coordinate, normalized across providers."""

    temperature: float = Field(..., description="Temperature in Fahrenheit")
    temperature_f: float = Field(..., description="Temperature in Fahrenheit")
    temperature_c: float = Field(..., description="Temperature in Celsius")
    humidity: float = Field(0, description="Relative humidity percent")
    wind_speed: float = Field(0, description="Wind speed in mph")
    wind_direction: str = Field("N", description="8-point compass direction")
    pressure: float = Field(30.0, description="Barometric pressure in inHg")
    real_feel: float | None = Field(None, description="Feels-like temperature (F)")
    cloud_cover: float = Field(0, description="Cloud cover percent")
    condition: ConditionCode = Field(..., description="Normalized condition code")
    condition_text: str = Field("Unknown", description="Provider description")
    location: str | None = Field(None, description="Human readable location")
    timestamp: str = Field(..., description="ISO timestamp of the observation")
    source: str = Field(..., description="Provider that produced the data")
    station: str | None = Field(None, description="Observation station identifier")
    is_mock_data: bool = Field(
        default=False, description="True when this is the static placeholder"
    )
    api_error: bool = Field(
        default=False, description="True when live providers were tried and failed"
    )

    model_config = ConfigDict(use_enum_values=True)
