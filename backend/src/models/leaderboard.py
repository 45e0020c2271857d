"""Leaderboard models."""

from enum import Enum

from pydantic import BaseModel


class Timeframe(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    ALL_TIME = "alltime"

    @classmethod
    def parse(cls, value: str | None) -> "Timeframe":
        """Anything that is not daily or weekly means all-time."""
        if value == cls.DAILY.value:
            return cls.DAILY
        if value == cls.WEEKLY.value:
            return cls.WEEKLY
        return cls.ALL_TIME


class LeaderboardEntry(BaseModel):
    """One ranked row."""

    rank: int
    user_id: str
    username: str
    display_name: str | None = None
    total_xp: int
    level: int
    reports_count: int
    predictions_count: int
    accuracy_rate: float
