"""Data models for the WeatherQuest backend."""

from .leaderboard import LeaderboardEntry, Timeframe
from .observation import ConditionCode, Observation
from .prediction import (
    PREDICTION_WINDOWS,
    PredictedCondition,
    Prediction,
    PredictionRequest,
    PredictionStatus,
)
from .user import PublicUser, SignInRequest, SignUpRequest, User
from .weather_report import WeatherReport, WeatherReportRequest

__all__ = [
    "ConditionCode",
    "Observation",
    "User",
    "PublicUser",
    "SignUpRequest",
    "SignInRequest",
    "WeatherReport",
    "WeatherReportRequest",
    "Prediction",
    "PredictionRequest",
    "PredictedCondition",
    "PredictionStatus",
    "PREDICTION_WINDOWS",
    "LeaderboardEntry",
    "Timeframe",
]
