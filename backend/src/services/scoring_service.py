"""XP, level, streak and accuracy rules.

Everything here is a pure function; callers own the state writes.
"""

from datetime import UTC, date, datetime

from models.prediction import PREDICTION_WINDOWS

XP_PER_LEVEL = 1000
REPORT_BASE_XP = 10
REPORT_TEMPERATURE_BONUS_XP = 5
REPORT_DESCRIPTION_BONUS_XP = 5


def report_xp(temperature: float | None, description: str | None) -> int:
    """XP for a report: base plus independent completeness bonuses.

    A temperature of 0 is a real reading and still earns the bonus; an empty
    description does not.
    """
    xp = REPORT_BASE_XP
    if temperature is not None:
        xp += REPORT_TEMPERATURE_BONUS_XP
    if description:
        xp += REPORT_DESCRIPTION_BONUS_XP
    return xp


def prediction_xp(window_minutes: int) -> int:
    """XP for submitting a nowcast; longer windows are worth more."""
    try:
        return PREDICTION_WINDOWS[window_minutes]
    except KeyError:
        raise ValueError(
            f"Unsupported prediction window: {window_minutes} minutes"
        ) from None


def level_for_xp(total_xp: int) -> int:
    """Level 1 covers 0-999 XP, level 2 covers 1000-1999, and so on."""
    if total_xp < 0:
        raise ValueError("XP cannot be negative")
    return total_xp // XP_PER_LEVEL + 1


def to_calendar_day(value: datetime | str | date) -> date:
    """Truncate a timestamp to its UTC calendar day.

    Naive datetimes are taken to already be UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date()
    return value


def day_delta(last_active: datetime | str | date, today: datetime | date) -> int:
    """Whole UTC calendar days between two moments, not elapsed hours / 24."""
    return (to_calendar_day(today) - to_calendar_day(last_active)).days


def next_streak(
    current_streak: int,
    last_active: datetime | str | date | None,
    today: datetime | date,
) -> int:
    """Compute the streak after activity on ``today``.

    No prior activity starts a streak at 1; same day keeps it; the next day
    extends it; any longer gap resets it to 1.
    """
    if last_active is None:
        return 1

    delta = day_delta(last_active, today)
    if delta == 1:
        return current_streak + 1
    if delta > 1:
        return 1
    # Same day, or clock skew put last_active in the future
    return current_streak


def accuracy_rate(correct: int, verified: int) -> float:
    """Percent of verified predictions that were correct."""
    if verified <= 0:
        return 0.0
    return round(correct / verified * 100, 1)
