"""Service for user-submitted weather reports."""

import logging
from datetime import UTC, datetime

from ulid import ULID

from models.user import User
from models.weather_report import (
    DEFAULT_LOCATION_NAME,
    WeatherReport,
    WeatherReportRequest,
)
from services.scoring_service import report_xp
from services.user_service import UserService
from stores.base import ReportStore

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_MILES = 10.0
MAX_REPORTS_RETURNED = 20


class ReportService:
    """Service for submitting and querying weather reports."""

    def __init__(self, report_store: ReportStore, user_service: UserService):
        """Initialize the report service.

        Args:
            report_store: Storage for reports
            user_service: Used to credit XP to the author
        """
        self.report_store = report_store
        self.user_service = user_service

    def submit_report(
        self, user_id: str, request: WeatherReportRequest
    ) -> tuple[WeatherReport, User]:
        """Submit a new report and credit the author.

        Args:
            user_id: ID of the user submitting the report
            request: The report request data

        Returns:
            The created report and the updated user

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.user_service.get_user(user_id)
        xp = report_xp(request.temperature, request.description)

        report = WeatherReport(
            report_id=str(ULID()),
            user_id=user.user_id,
            username=user.username,
            latitude=request.latitude,
            longitude=request.longitude,
            location_name=request.location_name or DEFAULT_LOCATION_NAME,
            weather_code=request.weather_code,
            temperature=request.temperature,
            description=request.description,
            xp_awarded=xp,
            created_at=datetime.now(UTC).isoformat(),
        )
        self.report_store.create(report)
        user = self.user_service.award_report_xp(user, xp)

        logger.info(
            "Report %s by %s: %s (+%d XP)",
            report.report_id,
            user.user_id,
            report.weather_code,
            xp,
        )
        return report, user

    def get_nearby_reports(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float = DEFAULT_RADIUS_MILES,
        limit: int = MAX_REPORTS_RETURNED,
    ) -> list[WeatherReport]:
        """Most recent reports within radius_miles of a point, newest first."""
        if radius_miles < 0:
            raise ValueError("Radius cannot be negative")
        return self.report_store.query_by_radius(
            latitude, longitude, radius_miles, limit=limit
        )
