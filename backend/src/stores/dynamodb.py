"""DynamoDB-backed stores.

Table layout:
    users:       PK user_id, GSIs EmailIndex (email) and UsernameIndex (username)
    reports:     PK report_id
    predictions: PK prediction_id
"""

import logging
from datetime import datetime

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from models.prediction import Prediction
from models.user import User
from models.weather_report import WeatherReport
from services.errors import ConflictError, NotFoundError
from utils.dynamodb_utils import (
    parse_from_dynamodb,
    prepare_for_dynamodb,
    python_to_decimal,
)
from utils.geo_utils import bounding_box, is_within_radius

from .base import PredictionStore, ReportStore, UserStore

logger = logging.getLogger(__name__)

EMAIL_INDEX = "EmailIndex"
USERNAME_INDEX = "UsernameIndex"


def _scan_all(table, **kwargs) -> list[dict]:
    """Scan a table following LastEvaluatedKey pagination."""
    response = table.scan(**kwargs)
    items = response.get("Items", [])
    while "LastEvaluatedKey" in response:
        response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))
    return items


class DynamoDBUserStore(UserStore):
    def __init__(self, table):
        self.table = table

    def create(self, user: User) -> User:
        # GSIs are eventually consistent, so this check narrows but cannot
        # fully close the duplicate window
        if self.find_by_email(user.email):
            raise ConflictError("Email already in use")
        if self.find_by_username(user.username):
            raise ConflictError("Username already taken")

        try:
            self.table.put_item(
                Item=prepare_for_dynamodb(user.model_dump()),
                ConditionExpression="attribute_not_exists(user_id)",
            )
            return user
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise ConflictError(f"User {user.user_id} already exists")
            logger.error("Failed to create user %s: %s", user.user_id, e)
            raise

    def get(self, user_id: str) -> User | None:
        response = self.table.get_item(Key={"user_id": user_id})
        item = response.get("Item")
        if not item:
            return None
        return User(**parse_from_dynamodb(item))

    def _find_by_index(self, index_name: str, attribute: str, value: str) -> User | None:
        response = self.table.query(
            IndexName=index_name,
            KeyConditionExpression=Key(attribute).eq(value),
            Limit=1,
        )
        items = response.get("Items", [])
        if not items:
            return None
        return User(**parse_from_dynamodb(items[0]))

    def find_by_email(self, email: str) -> User | None:
        return self._find_by_index(EMAIL_INDEX, "email", email.lower())

    def find_by_username(self, username: str) -> User | None:
        return self._find_by_index(USERNAME_INDEX, "username", username)

    def update(self, user: User) -> User:
        try:
            self.table.put_item(
                Item=prepare_for_dynamodb(user.model_dump()),
                ConditionExpression="attribute_exists(user_id)",
            )
            return user
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise NotFoundError(f"User {user.user_id} does not exist")
            logger.error("Failed to update user %s: %s", user.user_id, e)
            raise

    def list_all(self) -> list[User]:
        return [User(**parse_from_dynamodb(item)) for item in _scan_all(self.table)]


class DynamoDBReportStore(ReportStore):
    def __init__(self, table):
        self.table = table

    def create(self, report: WeatherReport) -> WeatherReport:
        self.table.put_item(Item=prepare_for_dynamodb(report.model_dump()))
        return report

    def query_by_radius(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float,
        limit: int | None = None,
    ) -> list[WeatherReport]:
        min_lat, max_lat, min_lon, max_lon = bounding_box(
            latitude, longitude, radius_miles
        )
        filter_expression = Attr("latitude").between(
            python_to_decimal(min_lat),
            python_to_decimal(max_lat),
        )
        # Boxes that cross the antimeridian are checked exactly below instead
        if -180.0 <= min_lon and max_lon <= 180.0:
            filter_expression = filter_expression & Attr("longitude").between(
                python_to_decimal(min_lon),
                python_to_decimal(max_lon),
            )

        items = _scan_all(self.table, FilterExpression=filter_expression)
        reports = [WeatherReport(**parse_from_dynamodb(item)) for item in items]
        nearby = [
            r
            for r in reports
            if is_within_radius(latitude, longitude, r.latitude, r.longitude, radius_miles)
        ]
        # ULIDs sort by creation time, which breaks timestamp ties deterministically
        nearby.sort(
            key=lambda r: (
                datetime.fromisoformat(r.created_at.replace("Z", "+00:00")),
                r.report_id,
            ),
            reverse=True,
        )
        return nearby[:limit] if limit is not None else nearby

    def list_since(self, since_iso: str) -> list[WeatherReport]:
        items = _scan_all(self.table, FilterExpression=Attr("created_at").gte(since_iso))
        return [WeatherReport(**parse_from_dynamodb(item)) for item in items]


class DynamoDBPredictionStore(PredictionStore):
    def __init__(self, table):
        self.table = table

    def create(self, prediction: Prediction) -> Prediction:
        self.table.put_item(Item=prepare_for_dynamodb(prediction.model_dump()))
        return prediction

    def get(self, prediction_id: str) -> Prediction | None:
        response = self.table.get_item(Key={"prediction_id": prediction_id})
        item = response.get("Item")
        if not item:
            return None
        return Prediction(**parse_from_dynamodb(item))

    def update(self, prediction: Prediction) -> Prediction:
        try:
            self.table.put_item(
                Item=prepare_for_dynamodb(prediction.model_dump()),
                ConditionExpression="attribute_exists(prediction_id)",
            )
            return prediction
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise NotFoundError(
                    f"Prediction {prediction.prediction_id} does not exist"
                )
            raise

    def list_since(self, since_iso: str) -> list[Prediction]:
        items = _scan_all(self.table, FilterExpression=Attr("created_at").gte(since_iso))
        return [Prediction(**parse_from_dynamodb(item)) for item in items]
