"""Demo data for local development and the in-memory backend."""

import logging
from datetime import UTC, datetime, timedelta

from models.user import User
from models.weather_report import WeatherReport
from services.auth_service import hash_password
from services.scoring_service import level_for_xp

from .base import ReportStore, UserStore

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@weather.com"
DEMO_PASSWORD = "demo123"

# (user_id, username, lat, lon, location, code, temp F, description, xp)
DEMO_REPORTS = [
    ("demo_user_1", "NYWeatherFan", 40.7580, -73.9855, "Times Square, Manhattan",
     "partly_cloudy", 88, "Hot and humid", 15),
    ("demo_user_2", "BrooklynSky", 40.6782, -73.9442, "Brooklyn Heights",
     "clear", 91, "Sunny and hot", 10),
    ("demo_user_3", "QueensObserver", 40.7282, -73.7949, "Flushing, Queens",
     "cloudy", 86, "Overcast but warm", 20),
    ("demo_user_4", "LAWeatherWatch", 34.0522, -118.2437, "Downtown LA",
     "clear", 78, "Perfect weather", 10),
    ("demo_user_5", "BeachWatcher", 33.9850, -118.4695, "Venice Beach",
     "fog", 68, "Marine layer", 25),
    ("demo_user_6", "WindyCityWeather", 41.8781, -87.6298, "The Loop, Chicago",
     "rain_light", 72, "Light drizzle", 20),
    ("demo_user_7", "MiamiStorms", 25.7617, -80.1918, "Downtown Miami",
     "storm", 84, "Afternoon thunderstorm", 30),
    ("demo_user_8", "RainyDaySeattle", 47.6062, -122.3321, "Capitol Hill, Seattle",
     "rain_moderate", 62, "Typical Seattle rain", 15),
]  # fmt: skip


def seed_demo_data(
    user_store: UserStore, report_store: ReportStore, now: datetime | None = None
) -> None:
    """Create the demo account and a handful of recent reports.

    Safe to call more than once; nothing is added if the demo user exists.
    """
    if user_store.find_by_email(DEMO_EMAIL):
        return

    now = now or datetime.now(UTC)
    timestamp = now.isoformat()
    demo_xp = 2500
    user_store.create(
        User(
            user_id="demo_user_1",
            email=DEMO_EMAIL,
            username="DemoUser",
            display_name="Demo User",
            password_hash=hash_password(DEMO_PASSWORD),
            total_xp=demo_xp,
            level=level_for_xp(demo_xp),
            streak=5,
            reports_count=45,
            predictions_count=28,
            verified_predictions=20,
            correct_predictions=17,
            accuracy_rate=85.0,
            created_at=timestamp,
            updated_at=timestamp,
        )
    )

    # Spread reports over the last two hours
    for index, row in enumerate(DEMO_REPORTS):
        user_id, username, lat, lon, location, code, temp, description, xp = row
        report_store.create(
            WeatherReport(
                report_id=f"demo_report_{index + 1}",
                user_id=user_id,
                username=username,
                latitude=lat,
                longitude=lon,
                location_name=location,
                weather_code=code,
                temperature=temp,
                description=description,
                xp_awarded=xp,
                created_at=(now - timedelta(minutes=15 * index)).isoformat(),
            )
        )

    logger.info("Seeded demo user and %d demo reports", len(DEMO_REPORTS))
