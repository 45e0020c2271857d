"""Tests for ReportService."""

from datetime import UTC, datetime, timedelta

import pytest

from conftest import make_user
from models.weather_report import WeatherReport, WeatherReportRequest
from services.errors import NotFoundError
from services.report_service import ReportService
from utils.geo_utils import haversine_distance


@pytest.fixture
def report_service(report_store, user_service):
    return ReportService(report_store, user_service)


def _report(report_id, lat, lon, created_at, user_id="user_1"):
    return WeatherReport(
        report_id=report_id,
        user_id=user_id,
        username="SkyWatcher",
        latitude=lat,
        longitude=lon,
        weather_code="clear",
        xp_awarded=10,
        created_at=created_at.isoformat(),
    )


class TestSubmitReport:
    def test_awards_xp_and_counts(self, report_service, sample_user, user_store):
        request = WeatherReportRequest(
            latitude=40.71, longitude=-74.0, weather_code="rain_light", temperature=55
        )

        report, user = report_service.submit_report(sample_user.user_id, request)

        assert report.xp_awarded == 15
        assert report.username == "SkyWatcher"
        assert report.location_name == "Unknown Location"
        assert report.weather_code == "rain_light"
        assert user.total_xp == 15
        assert user.reports_count == 1
        assert user_store.get(sample_user.user_id).total_xp == 15

    def test_level_up_scenario(self, report_service, user_store):
        """950 -> 965 stays level 1; 980 -> 995 -> 1005 reaches level 2."""
        user_store.create(make_user(total_xp=950))
        user_store.create(
            make_user(user_id="user_2", email="b@example.com", username="Second", total_xp=980)
        )
        temperature_only = WeatherReportRequest(
            latitude=1, longitude=1, weather_code="clear", temperature=70
        )
        base_only = WeatherReportRequest(latitude=1, longitude=1, weather_code="clear")

        _, first = report_service.submit_report("user_1", temperature_only)
        assert (first.total_xp, first.level) == (965, 1)

        _, second = report_service.submit_report("user_2", temperature_only)
        assert (second.total_xp, second.level) == (995, 1)

        _, second = report_service.submit_report("user_2", base_only)
        assert (second.total_xp, second.level) == (1005, 2)

    def test_unknown_user(self, report_service):
        request = WeatherReportRequest(latitude=1, longitude=1, weather_code="fog")

        with pytest.raises(NotFoundError):
            report_service.submit_report("missing", request)

    def test_temperature_zero_earns_bonus(self, report_service, sample_user):
        request = WeatherReportRequest(
            latitude=1, longitude=1, weather_code="snow_light", temperature=0
        )

        report, _ = report_service.submit_report(sample_user.user_id, request)

        assert report.xp_awarded == 15


class TestNearbyReports:
    NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)

    def test_filters_by_radius_newest_first(self, report_service, report_store):
        report_store.create(_report("near_old", 40.72, -74.0, self.NOW - timedelta(hours=2)))
        report_store.create(_report("far", 34.05, -118.24, self.NOW))
        report_store.create(_report("near_new", 40.70, -74.01, self.NOW - timedelta(minutes=5)))

        reports = report_service.get_nearby_reports(40.71, -74.0, 10)

        assert [r.report_id for r in reports] == ["near_new", "near_old"]

    def test_boundary_inclusive(self, report_service, report_store):
        report_store.create(_report("edge", 40.85, -74.0, self.NOW))
        radius = haversine_distance(40.71, -74.0, 40.85, -74.0)

        assert len(report_service.get_nearby_reports(40.71, -74.0, radius)) == 1
        assert report_service.get_nearby_reports(40.71, -74.0, radius - 0.001) == []

    def test_equal_timestamps_keep_insertion_order(self, report_service, report_store):
        for report_id in ["a", "b", "c"]:
            report_store.create(_report(report_id, 40.71, -74.0, self.NOW))

        reports = report_service.get_nearby_reports(40.71, -74.0, 1)

        assert [r.report_id for r in reports] == ["a", "b", "c"]

    def test_limit(self, report_service, report_store):
        for index in range(25):
            report_store.create(
                _report(f"r{index}", 40.71, -74.0, self.NOW - timedelta(minutes=index))
            )

        reports = report_service.get_nearby_reports(40.71, -74.0)

        assert len(reports) == 20
        assert reports[0].report_id == "r0"

    def test_zero_radius_only_exact_point(self, report_service, report_store):
        report_store.create(_report("here", 40.71, -74.0, self.NOW))
        report_store.create(_report("close", 40.7101, -74.0, self.NOW))

        reports = report_service.get_nearby_reports(40.71, -74.0, 0)

        assert [r.report_id for r in reports] == ["here"]

    def test_negative_radius(self, report_service):
        with pytest.raises(ValueError):
            report_service.get_nearby_reports(40.71, -74.0, -1)

    def test_empty_store(self, report_service):
        assert report_service.get_nearby_reports(0, 0, 100) == []
