"""Tests for request and record models."""

import pytest
from pydantic import ValidationError

from conftest import make_user
from models.prediction import Prediction, PredictionRequest
from models.weather_report import WeatherReport, WeatherReportRequest


class TestWeatherReportRequest:
    def test_minimal(self):
        request = WeatherReportRequest(latitude=40.7, longitude=-74.0, weather_code="fog")

        assert request.temperature is None
        assert request.description is None
        assert request.location_name is None

    @pytest.mark.parametrize(
        "field,value",
        [("latitude", 91), ("longitude", -181), ("temperature", 151), ("description", "x" * 501)],
    )
    def test_out_of_range(self, field, value):
        data = {"latitude": 0, "longitude": 0, "weather_code": "clear", field: value}

        with pytest.raises(ValidationError):
            WeatherReportRequest(**data)

    def test_unknown_condition(self):
        with pytest.raises(ValidationError):
            WeatherReportRequest(latitude=0, longitude=0, weather_code="sunny")


class TestWeatherReport:
    def test_reports_are_immutable(self):
        report = WeatherReport(
            report_id="r1",
            user_id="u1",
            username="u",
            latitude=0,
            longitude=0,
            weather_code="storm",
            xp_awarded=10,
            created_at="2026-03-10T12:00:00+00:00",
        )

        with pytest.raises(ValidationError):
            report.xp_awarded = 100
        assert report.location_name == "Unknown Location"


class TestPrediction:
    def test_defaults(self):
        prediction = Prediction(
            prediction_id="p1",
            user_id="u1",
            latitude=0,
            longitude=0,
            window_minutes=15,
            predicted_condition="storm_approaching",
            xp_awarded=50,
            created_at="2026-03-10T12:00:00+00:00",
            due_at="2026-03-10T12:15:00+00:00",
        )

        assert prediction.status == "pending"
        assert prediction.confidence == 50

    def test_request_window_validation(self):
        assert PredictionRequest(
            latitude=0, longitude=0, window_minutes=30, predicted_condition="cloudy"
        ).window_minutes == 30
        with pytest.raises(ValidationError):
            PredictionRequest(latitude=0, longitude=0, window_minutes=20, predicted_condition="cloudy")


class TestUser:
    def test_public_user_hides_hash(self):
        public = make_user(total_xp=1500).to_public()

        assert "password_hash" not in public.model_dump()
        assert public.level == 2
