"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime
from unittest.mock import Mock

import pytest
import requests

from models.user import User
from services.auth_service import hash_password
from services.user_service import UserService
from stores.memory import (
    InMemoryPredictionStore,
    InMemoryReportStore,
    InMemoryUserStore,
)
from utils.cache import clear_all_caches

TEST_PASSWORD = "correct-horse"
# Low iteration count keeps the suite fast; verify_password reads it from the hash
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD, iterations=1000)


def make_user(
    user_id="user_1",
    email="skywatcher@example.com",
    username="SkyWatcher",
    total_xp=0,
    streak=0,
    last_active_date=None,
    **kwargs,
) -> User:
    """Helper to build a User with sensible defaults."""
    now = datetime.now(UTC).isoformat()
    return User(
        user_id=user_id,
        email=email,
        username=username,
        display_name=username,
        password_hash=TEST_PASSWORD_HASH,
        total_xp=total_xp,
        level=total_xp // 1000 + 1,
        streak=streak,
        last_active_date=last_active_date,
        created_at=now,
        updated_at=now,
        **kwargs,
    )


def make_response(json_data=None, status_code=200):
    """Build a fake requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture(autouse=True)
def _clear_caches():
    """Clear process caches before and after each test."""
    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def report_store():
    return InMemoryReportStore()


@pytest.fixture
def prediction_store():
    return InMemoryPredictionStore()


@pytest.fixture
def user_service(user_store):
    return UserService(user_store)


@pytest.fixture
def sample_user(user_store):
    """A stored user with no XP yet."""
    user = make_user()
    user_store.create(user)
    return user
