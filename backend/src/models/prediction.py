"""Nowcast prediction models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PredictedCondition(str, Enum):
    """What a user expects the sky to do within the prediction window."""

    CLEAR = "clear"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    RAIN_STARTING = "rain_starting"
    RAIN_STOPPING = "rain_stopping"
    STORM_APPROACHING = "storm_approaching"


class PredictionStatus(str, Enum):
    """Verification state of a nowcast."""

    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"


# Window length in minutes -> XP awarded on submission
PREDICTION_WINDOWS: dict[int, int] = {15: 50, 30: 75, 60: 100}


class Prediction(BaseModel):
    """Stored nowcast."""

    prediction_id: str
    user_id: str
    latitude: float
    longitude: float
    window_minutes: int
    predicted_condition: PredictedCondition
    confidence: int = Field(50, ge=0, le=100)
    xp_awarded: int = Field(..., ge=0)
    status: PredictionStatus = PredictionStatus.PENDING
    observed_condition: str | None = None
    created_at: str
    due_at: str
    verified_at: str | None = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class PredictionRequest(BaseModel):
    """Request body for submitting a nowcast."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    window_minutes: int = Field(15, description="15, 30 or 60")
    predicted_condition: PredictedCondition
    confidence: int = Field(50, ge=0, le=100)

    @field_validator("window_minutes")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v not in PREDICTION_WINDOWS:
            raise ValueError(
                f"window_minutes must be one of {sorted(PREDICTION_WINDOWS)}"
            )
        return v
