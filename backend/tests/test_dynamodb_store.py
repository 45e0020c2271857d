"""Tests for the DynamoDB stores against moto."""

import os
from datetime import UTC, datetime, timedelta

import boto3
import pytest
from moto import mock_aws

from conftest import make_user
from models.prediction import Prediction
from models.weather_report import WeatherReport
from services.errors import ConflictError, NotFoundError
from stores.memory import InMemoryReportStore
from stores.dynamodb import (
    DynamoDBPredictionStore,
    DynamoDBReportStore,
    DynamoDBUserStore,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def create_tables(dynamodb):
    """Create the three tables with the production key layout."""
    users = dynamodb.create_table(
        TableName="test-users",
        KeySchema=[{"AttributeName": "user_id", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "user_id", "AttributeType": "S"},
            {"AttributeName": "email", "AttributeType": "S"},
            {"AttributeName": "username", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "EmailIndex",
                "KeySchema": [{"AttributeName": "email", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": "UsernameIndex",
                "KeySchema": [{"AttributeName": "username", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    reports = dynamodb.create_table(
        TableName="test-reports",
        KeySchema=[{"AttributeName": "report_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "report_id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    predictions = dynamodb.create_table(
        TableName="test-predictions",
        KeySchema=[{"AttributeName": "prediction_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "prediction_id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    return users, reports, predictions


@pytest.fixture
def tables():
    """Mocked DynamoDB tables."""
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        yield create_tables(dynamodb)


def _report(report_id, lat, lon, created_at, temperature=None):
    return WeatherReport(
        report_id=report_id,
        user_id="user_1",
        username="SkyWatcher",
        latitude=lat,
        longitude=lon,
        weather_code="rain_light",
        temperature=temperature,
        xp_awarded=10,
        created_at=created_at.isoformat(),
    )


class TestDynamoDBUserStore:
    def test_create_and_lookup(self, tables):
        store = DynamoDBUserStore(tables[0])
        store.create(make_user(total_xp=1234))

        by_id = store.get("user_1")
        assert by_id.total_xp == 1234
        assert isinstance(by_id.total_xp, int)
        assert store.find_by_email("SkyWatcher@Example.com").user_id == "user_1"
        assert store.find_by_username("SkyWatcher").user_id == "user_1"
        assert store.get("missing") is None

    def test_duplicates_rejected(self, tables):
        store = DynamoDBUserStore(tables[0])
        store.create(make_user())

        with pytest.raises(ConflictError, match="Email"):
            store.create(make_user(user_id="user_2", username="Other"))
        with pytest.raises(ConflictError, match="Username"):
            store.create(make_user(user_id="user_2", email="other@example.com"))

    def test_update(self, tables):
        store = DynamoDBUserStore(tables[0])
        store.create(make_user())
        user = store.get("user_1")
        user.accuracy_rate = 66.7
        user.streak = 3

        store.update(user)

        stored = store.get("user_1")
        assert stored.accuracy_rate == 66.7
        assert stored.streak == 3

    def test_update_missing(self, tables):
        with pytest.raises(NotFoundError):
            DynamoDBUserStore(tables[0]).update(make_user(user_id="ghost"))

    def test_list_all(self, tables):
        store = DynamoDBUserStore(tables[0])
        store.create(make_user())
        store.create(make_user(user_id="user_2", email="b@example.com", username="B"))

        assert len(store.list_all()) == 2


class TestDynamoDBReportStore:
    def test_query_by_radius(self, tables):
        store = DynamoDBReportStore(tables[1])
        store.create(_report("near_old", 40.72, -74.0, NOW - timedelta(hours=1), 55.5))
        store.create(_report("near_new", 40.70, -74.01, NOW))
        store.create(_report("far", 34.05, -118.24, NOW))

        reports = store.query_by_radius(40.71, -74.0, 10)

        assert [r.report_id for r in reports] == ["near_new", "near_old"]
        assert reports[1].temperature == 55.5
        assert reports[0].temperature is None

    def test_limit(self, tables):
        store = DynamoDBReportStore(tables[1])
        for index in range(5):
            store.create(_report(f"r{index}", 40.71, -74.0, NOW - timedelta(minutes=index)))

        reports = store.query_by_radius(40.71, -74.0, 1, limit=3)

        assert [r.report_id for r in reports] == ["r0", "r1", "r2"]

    def test_across_antimeridian(self, tables):
        store = DynamoDBReportStore(tables[1])
        store.create(_report("east", 0.0, 179.99, NOW))

        reports = store.query_by_radius(0.0, -179.99, 5)

        assert [r.report_id for r in reports] == ["east"]

    def test_high_latitude_matches_memory_store(self, tables):
        dynamodb_store = DynamoDBReportStore(tables[1])
        memory_store = InMemoryReportStore()
        for store in (dynamodb_store, memory_store):
            store.create(_report("nordic", 63.4, 29.8, NOW))
            store.create(_report("too_far", 63.4, 31.0, NOW))

        from_dynamodb = dynamodb_store.query_by_radius(60.0, 0.0, 1000)
        from_memory = memory_store.query_by_radius(60.0, 0.0, 1000)

        assert [r.report_id for r in from_dynamodb] == ["nordic"]
        assert [r.report_id for r in from_dynamodb] == [r.report_id for r in from_memory]

    def test_near_pole(self, tables):
        store = DynamoDBReportStore(tables[1])
        store.create(_report("other_side", 88.0, -170.0, NOW))

        reports = store.query_by_radius(85.0, 10.0, 500)

        assert [r.report_id for r in reports] == ["other_side"]

    def test_list_since(self, tables):
        store = DynamoDBReportStore(tables[1])
        store.create(_report("old", 1, 1, NOW - timedelta(days=3)))
        store.create(_report("new", 1, 1, NOW))

        since = (NOW - timedelta(days=1)).isoformat()
        assert [r.report_id for r in store.list_since(since)] == ["new"]


class TestDynamoDBPredictionStore:
    def _prediction(self):
        return Prediction(
            prediction_id="p1",
            user_id="user_1",
            latitude=40.71,
            longitude=-74.0,
            window_minutes=30,
            predicted_condition="rain_starting",
            confidence=80,
            xp_awarded=75,
            created_at=NOW.isoformat(),
            due_at=(NOW + timedelta(minutes=30)).isoformat(),
        )

    def test_round_trip_and_update(self, tables):
        store = DynamoDBPredictionStore(tables[2])
        store.create(self._prediction())

        stored = store.get("p1")
        assert stored.status == "pending"
        assert stored.latitude == 40.71

        stored.status = "incorrect"
        stored.observed_condition = "clear"
        store.update(stored)

        assert store.get("p1").status == "incorrect"
        assert store.get("missing") is None

    def test_update_missing(self, tables):
        with pytest.raises(NotFoundError):
            DynamoDBPredictionStore(tables[2]).update(self._prediction())

    def test_list_since(self, tables):
        store = DynamoDBPredictionStore(tables[2])
        store.create(self._prediction())

        assert len(store.list_since((NOW - timedelta(hours=1)).isoformat())) == 1
        assert store.list_since((NOW + timedelta(hours=1)).isoformat()) == []
