"""Tests for XP, level, streak and accuracy rules."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from services.scoring_service import (
    accuracy_rate,
    day_delta,
    level_for_xp,
    next_streak,
    prediction_xp,
    report_xp,
    to_calendar_day,
)


class TestReportXp:
    def test_base_only(self):
        assert report_xp(None, None) == 10

    def test_temperature_bonus(self):
        assert report_xp(72, None) == 15

    def test_zero_temperature_counts_as_present(self):
        assert report_xp(0, None) == 15

    def test_description_bonus(self):
        assert report_xp(None, "Light drizzle") == 15

    def test_empty_description_earns_nothing(self):
        assert report_xp(None, "") == 10

    def test_both_bonuses(self):
        assert report_xp(65.5, "Breezy") == 20

    @pytest.mark.parametrize(
        "temperature,description",
        [(None, None), (50, None), (None, "x"), (-10, "cold")],
    )
    def test_formula(self, temperature, description):
        expected = 10 + (5 if temperature is not None else 0) + (5 if description else 0)
        assert report_xp(temperature, description) == expected


class TestPredictionXp:
    def test_windows(self):
        assert prediction_xp(15) == 50
        assert prediction_xp(30) == 75
        assert prediction_xp(60) == 100

    def test_unknown_window(self):
        with pytest.raises(ValueError, match="Unsupported prediction window"):
            prediction_xp(45)


class TestLevelForXp:
    @pytest.mark.parametrize(
        "xp,level",
        [(0, 1), (999, 1), (1000, 2), (1005, 2), (1999, 2), (2000, 3), (15420, 16)],
    )
    def test_level_boundaries(self, xp, level):
        assert level_for_xp(xp) == level

    def test_non_decreasing(self):
        levels = [level_for_xp(xp) for xp in range(0, 5000, 7)]
        assert levels == sorted(levels)

    def test_negative_xp_rejected(self):
        with pytest.raises(ValueError):
            level_for_xp(-1)


class TestCalendarDays:
    def test_truncates_to_utc_date(self):
        value = datetime(2026, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        # 23:30 at UTC-5 is already the next day in UTC
        assert to_calendar_day(value) == date(2026, 3, 2)

    def test_parses_iso_strings(self):
        assert to_calendar_day("2026-03-01T10:00:00Z") == date(2026, 3, 1)
        assert to_calendar_day("2026-03-01T10:00:00+00:00") == date(2026, 3, 1)

    def test_day_delta_ignores_elapsed_hours(self):
        last = datetime(2026, 3, 1, 23, 59, tzinfo=UTC)
        today = datetime(2026, 3, 2, 0, 1, tzinfo=UTC)
        # Two minutes apart but on consecutive calendar days
        assert day_delta(last, today) == 1

    def test_day_delta_same_day(self):
        last = datetime(2026, 3, 1, 0, 1, tzinfo=UTC)
        today = datetime(2026, 3, 1, 23, 59, tzinfo=UTC)
        assert day_delta(last, today) == 0


class TestNextStreak:
    NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)

    def test_first_activity_starts_streak(self):
        assert next_streak(0, None, self.NOW) == 1

    def test_same_day_unchanged(self):
        assert next_streak(4, self.NOW.isoformat(), self.NOW) == 4

    def test_same_day_zero_stays_zero(self):
        assert next_streak(0, self.NOW.isoformat(), self.NOW) == 0

    def test_yesterday_increments(self):
        yesterday = (self.NOW - timedelta(days=1)).isoformat()
        assert next_streak(4, yesterday, self.NOW) == 5

    def test_three_days_ago_resets(self):
        three_days = (self.NOW - timedelta(days=3)).isoformat()
        assert next_streak(9, three_days, self.NOW) == 1

    def test_two_days_ago_resets(self):
        two_days = self.NOW - timedelta(days=2)
        assert next_streak(9, two_days, self.NOW) == 1

    def test_future_last_active_leaves_streak(self):
        tomorrow = (self.NOW + timedelta(days=1)).isoformat()
        assert next_streak(3, tomorrow, self.NOW) == 3


class TestAccuracyRate:
    def test_nothing_verified(self):
        assert accuracy_rate(0, 0) == 0.0

    def test_rounds_to_one_decimal(self):
        assert accuracy_rate(2, 3) == 66.7

    def test_perfect(self):
        assert accuracy_rate(5, 5) == 100.0
