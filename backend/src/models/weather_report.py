"""User-submitted weather report models."""

from pydantic import BaseModel, ConfigDict, Field

from .observation import ConditionCode

DEFAULT_LOCATION_NAME = "Unknown Location"


class WeatherReport(BaseModel):
    """Stored weather report. Reports are never edited once created."""

    report_id: str
    user_id: str
    username: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    location_name: str = DEFAULT_LOCATION_NAME
    weather_code: ConditionCode
    temperature: float | None = None
    description: str | None = None
    xp_awarded: int = Field(..., ge=0)
    created_at: str

    model_config = ConfigDict(use_enum_values=True, frozen=True)


class WeatherReportRequest(BaseModel):
    """Request body for submitting a weather report."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    location_name: str | None = Field(None, max_length=200)
    weather_code: ConditionCode
    temperature: float | None = Field(None, ge=-100, le=150)
    description: str | None = Field(None, max_length=500)
