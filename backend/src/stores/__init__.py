"""Storage backends for users, reports and predictions."""

from .base import PredictionStore, ReportStore, UserStore
from .memory import InMemoryPredictionStore, InMemoryReportStore, InMemoryUserStore

__all__ = [
    "UserStore",
    "ReportStore",
    "PredictionStore",
    "InMemoryUserStore",
    "InMemoryReportStore",
    "InMemoryPredictionStore",
]
